# wellness/models/__init__.py
from wellness.db.base_class import Base  # mantém

# Carrega módulos para registrar tabelas no metadata:
import wellness.models.event                # noqa: F401
import wellness.models.event_instance       # noqa: F401
import wellness.models.registration         # noqa: F401
import wellness.models.attendance           # noqa: F401
import wellness.models.wellness_assessment  # noqa: F401


__all__: list[str] = []
