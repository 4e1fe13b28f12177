from .night import SleepNight, UNRATED
from .dao import SleepDatabaseDao

__all__ = ["SleepNight", "UNRATED", "SleepDatabaseDao"]
