from datetime import date, datetime

import pytz

from memory_jar.config import APP_TIMEZONE


def today_local(tz: str = APP_TIMEZONE) -> date:
    """Calendar date right now in the app's timezone."""
    return datetime.now(pytz.timezone(tz)).date()
