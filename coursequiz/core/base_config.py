from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, PlainSerializer


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_utc(dt: Optional[datetime]) -> Optional[str]:
    """ISO 8601 with millisecond precision and an explicit 'Z' suffix."""
    if dt is None:
        return None
    # Naive datetimes coming back from SQLite are stored as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    elif dt.tzinfo != timezone.utc:
        dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


UTCDateTime = Annotated[datetime, PlainSerializer(format_utc, return_type=str, when_used="json")]


class BaseConfig(BaseModel):
    """Base for response models read straight off ORM rows."""
    model_config = ConfigDict(from_attributes=True)
