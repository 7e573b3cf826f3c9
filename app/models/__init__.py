# Import all models here for Alembic
from app.models.waitlist_entry import WaitlistEntry, RoleEnum

__all__ = [
    "WaitlistEntry",
    "RoleEnum",
]
