"""Database base class and model imports."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models here for Alembic to detect them
from classvote.db.models.vote import Vote  # noqa: F401, E402
from classvote.db.models.submission import Submission  # noqa: F401, E402
from classvote.db.models.reset_request import ResetRequest  # noqa: F401, E402
