from datetime import datetime
from uuid import UUID


def as_uuid(value: str | UUID | None) -> UUID | None:
    if value is None or isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


def isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
