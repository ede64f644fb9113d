# migrations/env.py
import os
from alembic import context
from dotenv import load_dotenv
from sqlalchemy import engine_from_config, pool

# (1) carregar .env antes de importar settings
load_dotenv()

from wellness.db.base import Base  # noqa: E402
from wellness.db.session import SQLALCHEMY_DATABASE_URL, _normalize  # noqa: E402

config = context.config

# (2) URL: a do chamador (run_migrations) ou a das settings
db_url = config.get_main_option("sqlalchemy.url") or os.getenv("DATABASE_URL") or SQLALCHEMY_DATABASE_URL
config.set_main_option("sqlalchemy.url", _normalize(db_url))

target_metadata = Base.metadata

def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(url=url, target_metadata=target_metadata, literal_binds=True, render_as_batch=True)
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    connectable = engine_from_config(config.get_section(config.config_ini_section), prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
