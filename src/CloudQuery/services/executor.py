"""Query execution against the data service.

Sends compiled query parameters through the REST transport and maps the
response envelope into `QueryResult` / `CountResult`.

Background variants run on one process-wide thread pool that is created at
import time and never shut down. Calls dispatched to it may run in parallel
and may complete in any order; they cannot be cancelled once submitted.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Protocol, TypeVar

from CloudQuery.client.rest import INVALID_RESPONSE_CODE, Response
from CloudQuery.core.errors import RemoteError
from CloudQuery.core.models import RemoteObject, default_mapper
from CloudQuery.core.query import Query
from CloudQuery.core.results import CountResult, QueryResult
from CloudQuery.utils.log import log

ResultT = TypeVar("ResultT", QueryResult, CountResult)

UNEXPECTED_ERROR_CODE = -3

BACKGROUND_POOL = ThreadPoolExecutor(thread_name_prefix="CloudQuery.Query")


class Transport(Protocol):
    """What the executor needs from the HTTP layer."""

    def request(
        self,
        method: str,
        endpoint: str,
        parameters: Mapping[str, Any] | None = None,
    ) -> Response:
        raise NotImplementedError


class Mapper(Protocol):
    def materialize(self, class_name: str, document: Mapping[str, Any]) -> RemoteObject:
        raise NotImplementedError


@dataclass(slots=True)
class QueryExecutor:
    """Runs queries through a transport and maps their results."""

    client: Transport
    mapper: Mapper = default_mapper

    def find(self, query: Query) -> QueryResult:
        """Find objects matching `query`, blocking until the response arrives.

        Raises:
            EncodingError: If the query cannot be compiled.
        """
        return self._find(query, query.request_parameters())

    def count(self, query: Query) -> CountResult:
        """Count objects matching `query`, blocking until the response arrives.

        Any limit set on the query is ignored.

        Raises:
            EncodingError: If the query cannot be compiled.
        """
        return self._count(query, self.count_parameters(query))

    def find_async(
        self,
        query: Query,
        completion: Callable[[QueryResult], None] | None = None,
    ) -> Future[QueryResult]:
        """Find objects on the background pool.

        The query is compiled on the calling thread, so later changes to it do
        not affect the request and compile errors are raised here.

        Args:
            query: Query to run.
            completion: Called with the result once the request finished.
                It runs on the worker thread.

        Returns:
            Future resolving to the result. Remote failures resolve to a
            failure result rather than an exception.
        """
        parameters = query.request_parameters()
        return self._dispatch(lambda: self._find(query, parameters), completion, QueryResult.failure)

    def count_async(
        self,
        query: Query,
        completion: Callable[[CountResult], None] | None = None,
    ) -> Future[CountResult]:
        """Count objects on the background pool. See `find_async`."""
        parameters = self.count_parameters(query)
        return self._dispatch(lambda: self._count(query, parameters), completion, CountResult.failure)

    @staticmethod
    def count_parameters(query: Query) -> dict[str, Any]:
        """Request parameters of a count request for `query`."""
        parameters = query.request_parameters()
        parameters["count"] = 1
        parameters["limit"] = 0
        return parameters

    def _find(self, query: Query, parameters: dict[str, Any]) -> QueryResult:
        class_name = query.class_name
        log.debug("Query find pending: class=%s", class_name)
        response = self.client.request("GET", query.endpoint, parameters)

        if response.error is not None:
            log.debug("Query find failed: class=%s error=%s", class_name, response.error)
            return QueryResult.failure(response.error)

        response_class = response.value.get("className") if response.value else None
        result_class = response_class if isinstance(response_class, str) and response_class else class_name
        objects = [self.mapper.materialize(result_class, document) for document in response.results]

        log.debug("Query find succeeded: class=%s count=%d", class_name, len(objects))
        return QueryResult.success(objects)

    def _count(self, query: Query, parameters: dict[str, Any]) -> CountResult:
        class_name = query.class_name
        log.debug("Query count pending: class=%s", class_name)
        response = self.client.request("GET", query.endpoint, parameters)

        if response.error is not None:
            log.debug("Query count failed: class=%s error=%s", class_name, response.error)
            return CountResult.failure(response.error)

        count = response.count
        if count is None:
            error = RemoteError(INVALID_RESPONSE_CODE, "Response has no count")
            log.debug("Query count failed: class=%s error=%s", class_name, error)
            return CountResult.failure(error)

        log.debug("Query count succeeded: class=%s count=%d", class_name, count)
        return CountResult.success(count)

    @staticmethod
    def _dispatch(
        task: Callable[[], ResultT],
        completion: Callable[[ResultT], None] | None,
        on_crash: Callable[[RemoteError], ResultT],
    ) -> Future[ResultT]:
        def run() -> ResultT:
            try:
                result = task()
            except Exception as error:  # noqa: BLE001 - background boundary, surfaced as a failure result
                log.exception("Background query crashed: %s", error)
                result = on_crash(RemoteError(UNEXPECTED_ERROR_CODE, str(error)))
            if completion is not None:
                try:
                    completion(result)
                except Exception as error:  # noqa: BLE001 - the future still carries the result
                    log.exception("Query completion callback failed: %s", error)
            return result

        return BACKGROUND_POOL.submit(run)
