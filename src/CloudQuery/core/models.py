from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from dateutil import parser as dt_parser

from CloudQuery.core.errors import EncodingError

_RESERVED_KEYS = frozenset({"objectId", "createdAt", "updatedAt", "className", "__type"})


@dataclass(slots=True)
class RemoteObject:
    """Object of a remote class, as returned by the data service.

    Attributes:
        class_name: Remote class name.
        object_id: Service-assigned id, None for objects never saved.
        created_at: Creation time if known.
        updated_at: Last update time if known.
        attributes: All other fields, with typed wire values decoded.
    """

    class_name: str
    object_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    attributes: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.attributes[key]

    def to_wire(self) -> dict[str, Any]:
        """Pointer to this object, for use as a constraint operand.

        Raises:
            EncodingError: If the object has no id yet.
        """
        if not self.object_id:
            raise EncodingError(f"Cannot reference unsaved {self.class_name} object")
        return {"__type": "Pointer", "className": self.class_name, "objectId": self.object_id}


ObjectFactory = Callable[[str], RemoteObject]


def _parse_dt(value: Any) -> datetime | None:
    if isinstance(value, Mapping):
        value = value.get("iso")
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return dt_parser.parse(value)
    except (TypeError, ValueError, OverflowError):
        return None


def decode_value(value: Any) -> Any:
    """Decode typed wire values (`Date`, `Pointer`, nested objects) into Python values."""
    if isinstance(value, list):
        return [decode_value(item) for item in value]
    if not isinstance(value, Mapping):
        return value

    type_name = value.get("__type")
    if type_name == "Date":
        parsed = _parse_dt(value)
        return parsed if parsed is not None else dict(value)
    if type_name in ("Pointer", "Object") and isinstance(value.get("className"), str):
        obj = RemoteObject(class_name=value["className"])
        _apply_fields(obj, value)
        return obj
    return {key: decode_value(item) for key, item in value.items()}


def _apply_fields(obj: RemoteObject, document: Mapping[str, Any]) -> None:
    object_id = document.get("objectId")
    if isinstance(object_id, str):
        obj.object_id = object_id
    if "createdAt" in document:
        obj.created_at = _parse_dt(document["createdAt"])
    if "updatedAt" in document:
        obj.updated_at = _parse_dt(document["updatedAt"])
    for key, value in document.items():
        if key in _RESERVED_KEYS:
            continue
        obj.attributes[key] = decode_value(value)


class ObjectMapper:
    """Turns result documents into `RemoteObject` instances.

    Factories can be registered per class name to materialize subclasses;
    unregistered classes produce plain `RemoteObject` instances.
    """

    def __init__(self) -> None:
        self._factories: dict[str, ObjectFactory] = {}

    def register(self, class_name: str, factory: ObjectFactory) -> None:
        self._factories[class_name] = factory

    def materialize(self, class_name: str, document: Mapping[str, Any]) -> RemoteObject:
        """Create an object of `class_name` and fill it from `document`."""
        factory = self._factories.get(class_name, RemoteObject)
        obj = factory(class_name)
        self.apply(obj, document)
        return obj

    def apply(self, obj: RemoteObject, document: Mapping[str, Any]) -> None:
        """Update `obj` in place with the fields of `document`."""
        _apply_fields(obj, document)


default_mapper = ObjectMapper()
