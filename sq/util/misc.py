import time
from datetime import datetime


# Simply returns the current local time as an ISO8601 string with timezone offset.
def now_iso():
    return datetime.now().astimezone().isoformat()

# Wall-clock epoch milliseconds, which is what nights are stored in.
def now_millis() -> int:
    return int(time.time() * 1000)
