"""
Models package: re-exports Base and all models.

Import models here so `Base.metadata` picks up every table automatically.

When adding a new model:
    1. Create `driver_onboarding/db/models/<table_name>.py`
    2. Import it here
"""

from driver_onboarding.db.models.base import Base
from driver_onboarding.db.models.driver import Driver

__all__ = [
    "Base",
    "Driver",
]
