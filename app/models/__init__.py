# Maintenance Ledger: Database Models
# Import all models here for SQLAlchemy discovery

from app.models.user import User          # noqa
from app.models.vehicle import Vehicle    # noqa
from app.models.job import Job            # noqa
from app.models.part import Part          # noqa
