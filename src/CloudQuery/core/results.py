"""Outcome types of query requests.

Remote failures are values, not exceptions: both the synchronous and the
background APIs hand back one of these, carrying either a payload or a
`RemoteError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from CloudQuery.core.errors import RemoteError

if TYPE_CHECKING:
    from CloudQuery.core.models import RemoteObject


@dataclass(frozen=True, slots=True)
class QueryResult:
    """Result of a find request.

    Attributes:
        objects: Materialized objects in response order (empty on failure).
        error: Failure cause, None on success.
    """

    objects: Sequence[RemoteObject] = ()
    error: RemoteError | None = None

    @classmethod
    def success(cls, objects: Sequence[RemoteObject]) -> QueryResult:
        return cls(objects=tuple(objects))

    @classmethod
    def failure(cls, error: RemoteError) -> QueryResult:
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    def unwrap(self) -> Sequence[RemoteObject]:
        """Return the objects or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.objects


@dataclass(frozen=True, slots=True)
class CountResult:
    """Result of a count request."""

    count: int = 0
    error: RemoteError | None = None

    @classmethod
    def success(cls, count: int) -> CountResult:
        return cls(count=count)

    @classmethod
    def failure(cls, error: RemoteError) -> CountResult:
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    def unwrap(self) -> int:
        """Return the count or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.count
