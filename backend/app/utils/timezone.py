from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

JOHANNESBURG_TZ = ZoneInfo("Africa/Johannesburg")


def now_local() -> datetime:
    return datetime.now(tz=JOHANNESBURG_TZ)


def today_local() -> date:
    return now_local().date()


def utc_stamp() -> str:
    return datetime.now(tz=timezone.utc).strftime("%Y%m%dT%H%M%S%f")
