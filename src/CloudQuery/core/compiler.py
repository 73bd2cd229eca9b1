"""Constraint compiler.

Translates one `(key, constraint)` application into an update of a
`QueryState`. The wire operator names live here and nowhere else.

Document layout produced for the data service:

    {"<key>": {"<op>": <operand>, ...},
     "$and": [{"<key>": <value>}, ...],
     "$relatedTo": {"object": <pointer>, "key": "<key>"}}

Equality constraints are the exception to "one operator document per key":
they are collected in `equality_table` and projected into `$and`, so several
equalities coexist. Every other constraint replaces whatever was stored under
its key before.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from CloudQuery.core.constraints import (
    Ascending,
    ContainedAllIn,
    ContainedIn,
    Constraint,
    Descending,
    EqualTo,
    EqualToSize,
    Existed,
    GreaterThan,
    GreaterThanOrEqualTo,
    Included,
    LessThan,
    LessThanOrEqualTo,
    MatchedPattern,
    MatchedQuery,
    MatchedQueryAndKey,
    MatchedSubstring,
    NearbyPoint,
    NearbyPointWithRange,
    NearbyPointWithRectangle,
    NotContainedIn,
    NotEqualTo,
    NotExisted,
    NotMatchedQuery,
    NotMatchedQueryAndKey,
    PrefixedBy,
    RelatedTo,
    Selected,
    SuffixedBy,
)
from CloudQuery.core.values import DistanceUnit, GeoDistance

OP_EXISTS = "$exists"
OP_NOT_EQUAL = "$ne"
OP_LESS_THAN = "$lt"
OP_LESS_THAN_OR_EQUAL = "$lte"
OP_GREATER_THAN = "$gt"
OP_GREATER_THAN_OR_EQUAL = "$gte"
OP_IN = "$in"
OP_NOT_IN = "$nin"
OP_ALL = "$all"
OP_SIZE = "$size"
OP_NEAR_SPHERE = "$nearSphere"
OP_WITHIN = "$within"
OP_BOX = "$box"
OP_IN_QUERY = "$inQuery"
OP_NOT_IN_QUERY = "$notInQuery"
OP_SELECT = "$select"
OP_DONT_SELECT = "$dontSelect"
OP_REGEX = "$regex"
OP_OPTIONS = "$options"
OP_RELATED_TO = "$relatedTo"
OP_AND = "$and"
OP_OR = "$or"

_COMPARISON_OPS: dict[type, str] = {
    NotEqualTo: OP_NOT_EQUAL,
    LessThan: OP_LESS_THAN,
    LessThanOrEqualTo: OP_LESS_THAN_OR_EQUAL,
    GreaterThan: OP_GREATER_THAN,
    GreaterThanOrEqualTo: OP_GREATER_THAN_OR_EQUAL,
}

_ARRAY_OPS: dict[type, str] = {
    ContainedIn: OP_IN,
    NotContainedIn: OP_NOT_IN,
    ContainedAllIn: OP_ALL,
}

_RE_METACHARS = re.compile(r"([\\.^$*+?()\[\]{}|/])")


@dataclass(slots=True)
class QueryState:
    """Mutable pieces of a query touched by constraints."""

    document: dict[str, Any] = field(default_factory=dict)
    equality_table: dict[str, Any] = field(default_factory=dict)
    included_keys: set[str] = field(default_factory=set)
    selected_keys: set[str] = field(default_factory=set)
    ordered_keys: str | None = None


def escape_pattern(string: str) -> str:
    """Escape regular expression metacharacters so `string` matches literally."""
    return _RE_METACHARS.sub(r"\\\1", string)


def distance_key(prefix: str, distance: GeoDistance) -> str:
    """Build a range key such as `$maxDistanceInKilometers`."""
    return f"{prefix}{DistanceUnit(distance.unit).value}"


def snapshot_operand(value: Any) -> Any:
    """Shallow-copy container operands so later caller mutations do not leak in."""
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, set):
        return set(value)
    return value


def apply_constraint(state: QueryState, key: str, constraint: Constraint) -> None:
    """Apply one constraint on `key` to `state`.

    Args:
        state: Query state to update in place.
        key: Field name the constraint applies to.
        constraint: Constraint value.

    Raises:
        TypeError: If `constraint` is not one of the constraint types.
    """
    dictionary: dict[str, Any] | None = None

    match constraint:
        case Included():
            state.included_keys.add(key)
        case Selected():
            state.selected_keys.add(key)
        case Existed():
            dictionary = {OP_EXISTS: True}
        case NotExisted():
            dictionary = {OP_EXISTS: False}

        case EqualTo(value=value):
            state.equality_table[key] = snapshot_operand(value)
            state.document[OP_AND] = [{k: v} for k, v in state.equality_table.items()]
        case NotEqualTo() | LessThan() | LessThanOrEqualTo() | GreaterThan() | GreaterThanOrEqualTo():
            dictionary = {_COMPARISON_OPS[type(constraint)]: snapshot_operand(constraint.value)}

        case ContainedIn() | NotContainedIn() | ContainedAllIn():
            dictionary = {_ARRAY_OPS[type(constraint)]: list(constraint.array)}
        case EqualToSize(size=size):
            dictionary = {OP_SIZE: size}

        case NearbyPoint(point=point):
            dictionary = {OP_NEAR_SPHERE: point}
        case NearbyPointWithRange(point=point, min_distance=min_distance, max_distance=max_distance):
            dictionary = {OP_NEAR_SPHERE: point}
            if min_distance is not None:
                dictionary[distance_key("$minDistanceIn", min_distance)] = min_distance.value
            if max_distance is not None:
                dictionary[distance_key("$maxDistanceIn", max_distance)] = max_distance.value
        case NearbyPointWithRectangle(southwest=southwest, northeast=northeast):
            dictionary = {OP_WITHIN: {OP_BOX: [southwest, northeast]}}

        case MatchedQuery(query=query):
            dictionary = {OP_IN_QUERY: query}
        case NotMatchedQuery(query=query):
            dictionary = {OP_NOT_IN_QUERY: query}
        case MatchedQueryAndKey(query=query, key=select_key):
            dictionary = {OP_SELECT: {"query": query, "key": select_key}}
        case NotMatchedQueryAndKey(query=query, key=select_key):
            dictionary = {OP_DONT_SELECT: {"query": query, "key": select_key}}

        case MatchedPattern(pattern=pattern, options=options):
            dictionary = {OP_REGEX: pattern, OP_OPTIONS: options or ""}
        case MatchedSubstring(string=string):
            dictionary = {OP_REGEX: escape_pattern(string)}
        case PrefixedBy(string=string):
            dictionary = {OP_REGEX: "^" + escape_pattern(string)}
        case SuffixedBy(string=string):
            dictionary = {OP_REGEX: escape_pattern(string) + "$"}

        case RelatedTo(object=obj):
            state.document[OP_RELATED_TO] = {"object": obj, "key": key}

        case Ascending():
            append_ordered_key(state, key)
        case Descending():
            append_ordered_key(state, "-" + key)

        case _:
            raise TypeError(f"Unsupported constraint: {constraint!r}")

    if dictionary is not None:
        state.document[key] = dictionary


def append_ordered_key(state: QueryState, ordered_key: str) -> None:
    """Append an ordering token to the ordering string.

    Tokens are concatenated as-is; no separator is inserted.
    """
    state.ordered_keys = (state.ordered_keys or "") + ordered_key
