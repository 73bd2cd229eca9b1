"""Constraint vocabulary for `Query.where_key`.

Each constraint is a small immutable record. The field it applies to is
passed separately to `Query.where_key`, so one constraint value can be reused
for several fields.

Example::
    query = Query("Post")
    query.where_key("likes", GreaterThan(10))
    query.where_key("title", PrefixedBy("Hello"))
    query.where_key("createdAt", DESCENDING)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence, Union

from CloudQuery.core.values import GeoDistance, GeoPoint

if TYPE_CHECKING:
    from CloudQuery.core.query import Query


# Key matching

@dataclass(frozen=True, slots=True)
class Included:
    """Expand the referenced object stored under the key."""


@dataclass(frozen=True, slots=True)
class Selected:
    """Return the key in the projection."""


@dataclass(frozen=True, slots=True)
class Existed:
    pass


@dataclass(frozen=True, slots=True)
class NotExisted:
    pass


# Equality matching

@dataclass(frozen=True, slots=True)
class EqualTo:
    value: Any


@dataclass(frozen=True, slots=True)
class NotEqualTo:
    value: Any


@dataclass(frozen=True, slots=True)
class LessThan:
    value: Any


@dataclass(frozen=True, slots=True)
class LessThanOrEqualTo:
    value: Any


@dataclass(frozen=True, slots=True)
class GreaterThan:
    value: Any


@dataclass(frozen=True, slots=True)
class GreaterThanOrEqualTo:
    value: Any


# Array matching

def _freeze_array(constraint: Any) -> None:
    array = constraint.array
    if isinstance(array, (str, bytes, bytearray)):
        raise TypeError(f"{type(constraint).__name__} expects a sequence of values, got {type(array).__name__}")
    object.__setattr__(constraint, "array", tuple(array))


@dataclass(frozen=True, slots=True)
class ContainedIn:
    array: Sequence[Any]

    def __post_init__(self) -> None:
        _freeze_array(self)


@dataclass(frozen=True, slots=True)
class NotContainedIn:
    array: Sequence[Any]

    def __post_init__(self) -> None:
        _freeze_array(self)


@dataclass(frozen=True, slots=True)
class ContainedAllIn:
    array: Sequence[Any]

    def __post_init__(self) -> None:
        _freeze_array(self)


@dataclass(frozen=True, slots=True)
class EqualToSize:
    size: int


# Geo point matching

@dataclass(frozen=True, slots=True)
class NearbyPoint:
    point: GeoPoint


@dataclass(frozen=True, slots=True)
class NearbyPointWithRange:
    """Points near `point`, optionally bounded by a min and/or max distance.

    The two bounds carry their own units, so `min_distance` may be in miles
    while `max_distance` is in kilometers.
    """

    point: GeoPoint
    min_distance: GeoDistance | None = None
    max_distance: GeoDistance | None = None


@dataclass(frozen=True, slots=True)
class NearbyPointWithRectangle:
    southwest: GeoPoint
    northeast: GeoPoint


# Query matching

@dataclass(frozen=True, slots=True, eq=False)
class MatchedQuery:
    query: Query


@dataclass(frozen=True, slots=True, eq=False)
class NotMatchedQuery:
    query: Query


@dataclass(frozen=True, slots=True, eq=False)
class MatchedQueryAndKey:
    """Value of the field equals `key` of some object matched by `query`."""

    query: Query
    key: str


@dataclass(frozen=True, slots=True, eq=False)
class NotMatchedQueryAndKey:
    query: Query
    key: str


# String matching

@dataclass(frozen=True, slots=True)
class MatchedPattern:
    """Raw regular expression, passed to the service untouched."""

    pattern: str
    options: str | None = None


@dataclass(frozen=True, slots=True)
class MatchedSubstring:
    string: str


@dataclass(frozen=True, slots=True)
class PrefixedBy:
    string: str


@dataclass(frozen=True, slots=True)
class SuffixedBy:
    string: str


# Relation

@dataclass(frozen=True, slots=True, eq=False)
class RelatedTo:
    """Objects in the relation stored under the key of `object`."""

    object: Any


# Ordering

@dataclass(frozen=True, slots=True)
class Ascending:
    pass


@dataclass(frozen=True, slots=True)
class Descending:
    pass


Constraint = Union[
    Included,
    Selected,
    Existed,
    NotExisted,
    EqualTo,
    NotEqualTo,
    LessThan,
    LessThanOrEqualTo,
    GreaterThan,
    GreaterThanOrEqualTo,
    ContainedIn,
    NotContainedIn,
    ContainedAllIn,
    EqualToSize,
    NearbyPoint,
    NearbyPointWithRange,
    NearbyPointWithRectangle,
    MatchedQuery,
    NotMatchedQuery,
    MatchedQueryAndKey,
    NotMatchedQueryAndKey,
    MatchedPattern,
    MatchedSubstring,
    PrefixedBy,
    SuffixedBy,
    RelatedTo,
    Ascending,
    Descending,
]

INCLUDED = Included()
SELECTED = Selected()
EXISTED = Existed()
NOT_EXISTED = NotExisted()
ASCENDING = Ascending()
DESCENDING = Descending()
