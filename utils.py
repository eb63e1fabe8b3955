from datetime import datetime
from dateutil import tz

from settings import shop_timezone

def get_local_now():
    return datetime.now(tz=tz.gettz(shop_timezone()))

def format_local_time(dt: datetime) -> str:
    return dt.strftime("%d %b %Y, %H:%M")
