from datetime import datetime
from typing import Optional

from dateutil.parser import parse as parse_date


def maybe_parse_date(dt: Optional[str]) -> Optional[datetime]:
    if dt:
        return parse_date(dt)

    return None


def format_date(dt: datetime) -> str:
    # the api server wants RFC 3339 in UTC with a literal Z
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")
