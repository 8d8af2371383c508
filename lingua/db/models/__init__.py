# SQLAlchemy models
from .base import Base
from .cards import CardRecord
from .streaks import StreakRecord
from .user_settings import UserSetting

__all__ = [
    "Base",
    "CardRecord",
    "StreakRecord",
    "UserSetting",
]
