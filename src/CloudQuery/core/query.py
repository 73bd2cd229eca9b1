"""Query builder.

A `Query` collects constraints on the fields of one remote class and compiles
them into the parameters of a `GET /classes/<className>` request.

Compiled form (`json_value`):

    {"className": "Post",
     "where": {...},         # omitted when there are no constraints
     "include": "a,b",       # omitted when empty
     "keys": "a,b",          # omitted when empty
     "order": "-createdAt",  # omitted when unset
     "limit": 10,            # omitted when None
     "skip": 20}             # omitted when None

A query is a plain mutable value owned by its caller. It is not safe to
mutate one instance from several threads at once.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Callable

from CloudQuery.client.rest import endpoint_for
from CloudQuery.core.compiler import OP_AND, OP_OR, QueryState, apply_constraint
from CloudQuery.core.constraints import Constraint
from CloudQuery.core.errors import InconsistentClassError
from CloudQuery.core.values import encode_value

if TYPE_CHECKING:
    from concurrent.futures import Future

    from CloudQuery.core.results import CountResult, QueryResult
    from CloudQuery.services.executor import QueryExecutor


class Query:
    """Constraints, projection, ordering and pagination for one class.

    Attributes:
        limit: Maximum number of objects to return, None for the service default.
        skip: Number of objects to skip, None for no offset.
    """

    def __init__(self, class_name: str) -> None:
        if not class_name:
            raise ValueError("class_name must not be empty")
        self._class_name = class_name
        self._state = QueryState()
        self.limit: int | None = None
        self.skip: int | None = None

    @property
    def class_name(self) -> str:
        return self._class_name

    def where_key(self, key: str, constraint: Constraint) -> Query:
        """Add a constraint on `key`.

        Args:
            key: Field name.
            constraint: One of the constraints from `CloudQuery.core.constraints`.

        Returns:
            This query, to allow chaining.
        """
        apply_constraint(self._state, key, constraint)
        return self

    def validate_class_name(self, query: Query) -> None:
        """Raise `InconsistentClassError` unless `query` targets the same class."""
        if query.class_name != self.class_name:
            raise InconsistentClassError(self.class_name, query.class_name)

    def logic_and(self, query: Query) -> Query:
        """Return a new query matching objects matched by both queries.

        Only constraints are combined; limit, skip, ordering and projection of
        both operands are discarded.

        Raises:
            InconsistentClassError: If the class names differ.
        """
        return self._combine(OP_AND, query)

    def logic_or(self, query: Query) -> Query:
        """Return a new query matching objects matched by either query.

        Only constraints are combined; limit, skip, ordering and projection of
        both operands are discarded.

        Raises:
            InconsistentClassError: If the class names differ.
        """
        return self._combine(OP_OR, query)

    def __and__(self, other: object) -> Query:
        if not isinstance(other, Query):
            return NotImplemented
        return self.logic_and(other)

    def __or__(self, other: object) -> Query:
        if not isinstance(other, Query):
            return NotImplemented
        return self.logic_or(other)

    def _combine(self, operator: str, query: Query) -> Query:
        self.validate_class_name(query)
        result = Query(self.class_name)
        # Encoded copies, so later changes to either operand do not leak in.
        result._state.document[operator] = [self.where_value(), query.where_value()]
        return result

    def where_value(self) -> dict[str, Any]:
        """Encode the constraint document.

        Raises:
            EncodingError: If a constraint operand has no wire form.
        """
        return encode_value(self._state.document)

    def json_value(self) -> dict[str, Any]:
        """Compile the query into its structured wire representation.

        Raises:
            EncodingError: If a constraint operand has no wire form.
        """
        state = self._state
        dictionary: dict[str, Any] = {"className": self.class_name}

        if state.document:
            dictionary["where"] = self.where_value()
        if state.included_keys:
            dictionary["include"] = ",".join(sorted(state.included_keys))
        if state.selected_keys:
            dictionary["keys"] = ",".join(sorted(state.selected_keys))
        if state.ordered_keys is not None:
            dictionary["order"] = state.ordered_keys
        if self.limit is not None:
            dictionary["limit"] = self.limit
        if self.skip is not None:
            dictionary["skip"] = self.skip

        return dictionary

    @property
    def endpoint(self) -> str:
        """REST path of the class this query targets."""
        return endpoint_for(self.class_name)

    def sub_query_value(self) -> dict[str, Any]:
        """Representation used when this query is nested in another one.

        Only the class name and constraints are kept; limit, skip, ordering
        and projection do not apply to a nested query.
        """
        value: dict[str, Any] = {"className": self.class_name}
        if self._state.document:
            value["where"] = self.where_value()
        return value

    def to_wire(self) -> dict[str, Any]:
        return self.sub_query_value()

    def request_parameters(self) -> dict[str, Any]:
        """Compile the query into request parameters.

        Same as `json_value`, except that `where` is serialized to a JSON
        string, which is what the query-string transport expects.
        """
        parameters = self.json_value()
        if "where" in parameters:
            parameters["where"] = json.dumps(parameters["where"], ensure_ascii=False, separators=(",", ":"))
        return parameters

    def find(self, executor: QueryExecutor) -> QueryResult:
        """Find objects synchronously through `executor`."""
        return executor.find(self)

    def find_async(
        self,
        executor: QueryExecutor,
        completion: Callable[[QueryResult], None] | None = None,
    ) -> Future[QueryResult]:
        """Find objects in the background through `executor`."""
        return executor.find_async(self, completion)

    def count(self, executor: QueryExecutor) -> CountResult:
        """Count objects synchronously through `executor`."""
        return executor.count(self)

    def count_async(
        self,
        executor: QueryExecutor,
        completion: Callable[[CountResult], None] | None = None,
    ) -> Future[CountResult]:
        """Count objects in the background through `executor`."""
        return executor.count_async(self, completion)

    def __repr__(self) -> str:
        return f"Query(class_name={self.class_name!r}, where={self._state.document!r})"
