"""JSON codec for the cached upcoming-concerts list"""

from datetime import datetime
from typing import Any, List, Optional

import attrs
import orjson

from src.service.concert.domain.entity.concert_entity import Concert


_DATETIME_FIELDS = ('start_time', 'created_on', 'updated_on')


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value is not None else None


def serialize_concerts(concerts: List[Concert]) -> str:
    # orjson emits datetimes as RFC 3339 strings
    return orjson.dumps([attrs.asdict(concert) for concert in concerts]).decode('utf-8')


def _concert_from_dict(data: Any) -> Concert:
    if not isinstance(data, dict):
        raise ValueError(f'Expected a JSON object, got {type(data).__name__}')
    for field in _DATETIME_FIELDS:
        data[field] = _parse_datetime(data.get(field))
    return Concert(**data)


def deserialize_concerts(payload: str) -> List[Concert]:
    """Raises ValueError / TypeError / KeyError on malformed payloads"""
    data = orjson.loads(payload)
    if not isinstance(data, list):
        raise ValueError(f'Expected a JSON array, got {type(data).__name__}')
    return [_concert_from_dict(item) for item in data]
