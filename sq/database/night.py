from dataclasses import dataclass, field
from sq.util import now_millis

UNRATED = -1


# One row of the nights table. A freshly created night starts and ends "now", which is how an in-progress night is
# recognised until its end gets stamped.
@dataclass
class SleepNight:
    night_id: int = 0
    start_time_milli: int = field(default_factory=now_millis)
    end_time_milli: int | None = None
    sleep_quality: int = UNRATED

    def __post_init__(self):
        if self.end_time_milli is None:
            self.end_time_milli = self.start_time_milli

    @property
    def is_in_progress(self):
        return self.end_time_milli == self.start_time_milli

    @property
    def duration_milli(self):
        return self.end_time_milli - self.start_time_milli

    def to_dict(self):
        return {
            "night_id": self.night_id,
            "start_time_milli": self.start_time_milli,
            "end_time_milli": self.end_time_milli,
            "sleep_quality": self.sleep_quality,
        }
