from .viewmodel import SleepQualityViewModel, QUALITY_RATINGS

__all__ = ["SleepQualityViewModel", "QUALITY_RATINGS"]
