"""Wire encoding of constraint operands.

Every operand handed to a constraint must be encodable to the JSON-shaped
wire format understood by the data service. Scalars pass through unchanged,
containers are encoded recursively and the typed values below use the
service's `__type` envelopes:

- datetime -> {"__type": "Date", "iso": "2016-04-19T08:00:00.000Z"}
- bytes    -> {"__type": "Bytes", "base64": "..."}
- GeoPoint -> {"__type": "GeoPoint", "latitude": ..., "longitude": ...}
- Pointer  -> {"__type": "Pointer", "className": ..., "objectId": ...}

Objects exposing `to_wire()` (queries, remote objects) encode themselves.
"""

from __future__ import annotations

import base64
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Mapping

from CloudQuery.core.errors import EncodingError


class DistanceUnit(str, Enum):
    """Unit suffix used by geo range operators."""

    RADIANS = "Radians"
    MILES = "Miles"
    KILOMETERS = "Kilometers"


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """Geographic point in degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")

    def to_wire(self) -> dict[str, Any]:
        return {"__type": "GeoPoint", "latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True, slots=True)
class GeoDistance:
    """One bound of a geo range query."""

    value: float
    unit: DistanceUnit = DistanceUnit.KILOMETERS


@dataclass(frozen=True, slots=True)
class Pointer:
    """Reference to a remote object by class name and id."""

    class_name: str
    object_id: str

    def to_wire(self) -> dict[str, Any]:
        return {"__type": "Pointer", "className": self.class_name, "objectId": self.object_id}


def format_date(value: datetime | date) -> str:
    """Format a date in the service's ISO form (UTC, millisecond precision)."""
    if not isinstance(value, datetime):
        value = datetime.combine(value, time(), tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def encode_value(value: Any) -> Any:
    """Encode a Python value into its wire representation.

    Args:
        value: Constraint operand or nested container.

    Returns:
        JSON-compatible structure. Containers are always fresh copies.

    Raises:
        EncodingError: If the value, or anything nested in it, has no wire form.
    """
    if isinstance(value, Enum):
        return encode_value(value.value)
    if value is None or isinstance(value, (bool, str, int)):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise EncodingError(f"Cannot encode non-finite number: {value}")
        return value
    if isinstance(value, (datetime, date)):
        return {"__type": "Date", "iso": format_date(value)}
    if isinstance(value, (bytes, bytearray)):
        return {"__type": "Bytes", "base64": base64.b64encode(bytes(value)).decode("ascii")}
    to_wire = getattr(value, "to_wire", None)
    if callable(to_wire):
        return encode_value(to_wire())
    if isinstance(value, Mapping):
        encoded: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise EncodingError(f"Map keys must be strings, got {type(key).__name__}")
            encoded[key] = encode_value(item)
        return encoded
    if isinstance(value, (list, tuple, set, frozenset)):
        return [encode_value(item) for item in value]
    raise EncodingError(f"Cannot encode value of type {type(value).__name__}")
