"""Command implementations for the CloudQuery CLI.

Builds a `Query` from command-line options and runs one action on it,
separated from click parameter handling.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable

import click

from CloudQuery.core.constraints import (
    ASCENDING,
    DESCENDING,
    EXISTED,
    INCLUDED,
    NOT_EXISTED,
    SELECTED,
    EqualTo,
    MatchedSubstring,
    NotEqualTo,
    PrefixedBy,
)
from CloudQuery.core.models import RemoteObject
from CloudQuery.core.query import Query
from CloudQuery.core.values import format_date
from CloudQuery.services.executor import QueryExecutor
from CloudQuery.utils.log import log


@dataclass(frozen=True, slots=True)
class QueryOptions:
    """Query description collected from the command line.

    Pair options hold raw `key=value` strings; values are parsed as JSON when
    possible and used as plain strings otherwise.
    """

    class_name: str
    equal: tuple[str, ...] = ()
    not_equal: tuple[str, ...] = ()
    exists: tuple[str, ...] = ()
    not_exists: tuple[str, ...] = ()
    prefix: tuple[str, ...] = ()
    contains: tuple[str, ...] = ()
    asc: tuple[str, ...] = ()
    desc: tuple[str, ...] = ()
    include: tuple[str, ...] = ()
    select: tuple[str, ...] = ()
    limit: int | None = None
    skip: int | None = None


def parse_pair(raw: str) -> tuple[str, Any]:
    """Split `key=value`, decoding the value as JSON when it parses.

    Raises:
        click.BadParameter: If `raw` has no `=` or an empty key.
    """
    key, sep, value = raw.partition("=")
    key = key.strip()
    if not sep or not key:
        raise click.BadParameter(f"expected key=value, got {raw!r}")
    try:
        return key, json.loads(value)
    except ValueError:
        return key, value


def build_query(options: QueryOptions) -> Query:
    """Translate CLI options into a `Query`."""
    query = Query(options.class_name)

    pair_constraints: tuple[tuple[tuple[str, ...], Callable[[Any], Any]], ...] = (
        (options.equal, EqualTo),
        (options.not_equal, NotEqualTo),
        (options.prefix, lambda value: PrefixedBy(str(value))),
        (options.contains, lambda value: MatchedSubstring(str(value))),
    )
    for raws, make in pair_constraints:
        for raw in raws:
            key, value = parse_pair(raw)
            query.where_key(key, make(value))

    for keys, constraint in (
        (options.exists, EXISTED),
        (options.not_exists, NOT_EXISTED),
        (options.include, INCLUDED),
        (options.select, SELECTED),
        (options.asc, ASCENDING),
        (options.desc, DESCENDING),
    ):
        for key in keys:
            query.where_key(key, constraint)

    query.limit = options.limit
    query.skip = options.skip
    return query


def object_to_dict(obj: RemoteObject) -> dict[str, Any]:
    """Flatten a remote object into a JSON-friendly mapping for printing."""
    data: dict[str, Any] = {"className": obj.class_name}
    if obj.object_id:
        data["objectId"] = obj.object_id
    if obj.created_at:
        data["createdAt"] = format_date(obj.created_at)
    if obj.updated_at:
        data["updatedAt"] = format_date(obj.updated_at)
    for key, value in obj.attributes.items():
        data[key] = object_to_dict(value) if isinstance(value, RemoteObject) else value
    return data


def _dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


@dataclass(slots=True)
class QueryCommand:
    """Runs one CLI action for a compiled query."""

    query: Query
    executor: QueryExecutor | None = None

    def compile(self) -> None:
        """Print the request parameters without contacting the server."""
        click.echo(json.dumps(self.query.request_parameters(), ensure_ascii=False, indent=2))

    def find(self) -> None:
        """Print every matched object as one JSON line."""
        result = self._require_executor().find(self.query)
        objects = result.unwrap()
        log.info("Found %d %s objects", len(objects), self.query.class_name)
        for obj in objects:
            click.echo(_dumps(object_to_dict(obj)))

    def count(self) -> None:
        """Print the number of matched objects."""
        result = self._require_executor().count(self.query)
        click.echo(str(result.unwrap()))

    def _require_executor(self) -> QueryExecutor:
        if self.executor is None:
            raise RuntimeError("This command needs a query executor")
        return self.executor
