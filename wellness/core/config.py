# wellness/core/config.py
import os
from typing import ClassVar, Literal
from pydantic import BaseModel, Field

def _default_database_url() -> str:
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    os.makedirs(data_dir, exist_ok=True)
    return os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(data_dir, 'wellness.db')}")

def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}

class Settings(BaseModel):
    # Constante (não vira campo Pydantic)
    DATA_DIR: ClassVar[str] = os.path.abspath(os.getenv("DATA_DIR", "./data"))

    DATABASE_URL: str = Field(default_factory=_default_database_url)
    SECRET_KEY: str = Field(default_factory=lambda: os.getenv("SECRET_KEY", "CHANGE_ME_SUPER_SECRET"))
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30")))
    TIMEZONE: str = Field(default_factory=lambda: os.getenv("TIMEZONE", "UTC"))
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(default_factory=lambda: _env_bool("RUN_MIGRATIONS_ON_STARTUP", "true"))

    # open-ended rules stop this many days after start_date
    RECURRENCE_HORIZON_DAYS: int = Field(default_factory=lambda: int(os.getenv("RECURRENCE_HORIZON_DAYS", "365")))
    # hard cap per expansion, bounded windows included
    RECURRENCE_MAX_INSTANCES: int = Field(default_factory=lambda: int(os.getenv("RECURRENCE_MAX_INSTANCES", "366")))

    # what deactivating an instance does to its confirmed registrations
    INSTANCE_CANCEL_POLICY: Literal["block", "cascade"] = Field(
        default_factory=lambda: os.getenv("INSTANCE_CANCEL_POLICY", "block")
    )

settings = Settings()
