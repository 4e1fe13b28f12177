from .viewmodel import SleepTrackerViewModel, CLEARED_MESSAGE

__all__ = ["SleepTrackerViewModel", "CLEARED_MESSAGE"]
