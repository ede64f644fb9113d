# wellness/db/base.py
# Importa todos os models para registrar as tabelas no metadata (Alembic/create_all).
from wellness.db.base_class import Base  # noqa: F401

from wellness.models.event import Event  # noqa: F401
from wellness.models.event_instance import EventInstance  # noqa: F401
from wellness.models.registration import Registration  # noqa: F401
from wellness.models.attendance import Attendance  # noqa: F401
from wellness.models.wellness_assessment import WellnessAssessment  # noqa: F401
