"""Date manipulation utilities"""

from datetime import datetime
from zoneinfo import ZoneInfo


def format_txn_time(tz_name: str, now: datetime | None = None) -> str:
    """Render a transaction time as 'DD/MM/YYYY, h:mm:ss am' in the given timezone"""
    moment = (now or datetime.now(ZoneInfo(tz_name))).astimezone(ZoneInfo(tz_name))
    hour = moment.hour % 12 or 12
    meridiem = "am" if moment.hour < 12 else "pm"
    return f"{moment:%d/%m/%Y}, {hour}:{moment:%M:%S} {meridiem}"
