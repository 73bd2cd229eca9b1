"""CloudQuery: query builder and client for a remote document data service.

Typical use:

    from CloudQuery import EqualTo, GreaterThan, Query, DESCENDING

    query = Query("Post")
    query.where_key("author", EqualTo("alice"))
    query.where_key("likes", GreaterThan(10))
    query.where_key("createdAt", DESCENDING)
    query.limit = 20

    result = query.find(executor)
    if result.is_success:
        for post in result.objects:
            print(post.object_id, post.get("title"))
"""

from __future__ import annotations

from CloudQuery.core.constraints import (
    ASCENDING,
    DESCENDING,
    EXISTED,
    INCLUDED,
    NOT_EXISTED,
    SELECTED,
    Ascending,
    Constraint,
    ContainedAllIn,
    ContainedIn,
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
from CloudQuery.core.errors import CloudQueryError, EncodingError, InconsistentClassError, RemoteError
from CloudQuery.core.models import ObjectMapper, RemoteObject, default_mapper
from CloudQuery.core.query import Query
from CloudQuery.core.results import CountResult, QueryResult
from CloudQuery.core.values import DistanceUnit, GeoDistance, GeoPoint, Pointer
from CloudQuery.client.rest import Response, RestClient
from CloudQuery.services import QueryExecutor, create_query_executor

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "EXISTED",
    "INCLUDED",
    "NOT_EXISTED",
    "SELECTED",
    "Ascending",
    "CloudQueryError",
    "Constraint",
    "ContainedAllIn",
    "ContainedIn",
    "CountResult",
    "Descending",
    "DistanceUnit",
    "EncodingError",
    "EqualTo",
    "EqualToSize",
    "Existed",
    "GeoDistance",
    "GeoPoint",
    "GreaterThan",
    "GreaterThanOrEqualTo",
    "InconsistentClassError",
    "Included",
    "LessThan",
    "LessThanOrEqualTo",
    "MatchedPattern",
    "MatchedQuery",
    "MatchedQueryAndKey",
    "MatchedSubstring",
    "NearbyPoint",
    "NearbyPointWithRange",
    "NearbyPointWithRectangle",
    "NotContainedIn",
    "NotEqualTo",
    "NotExisted",
    "NotMatchedQuery",
    "NotMatchedQueryAndKey",
    "ObjectMapper",
    "Pointer",
    "PrefixedBy",
    "Query",
    "QueryExecutor",
    "QueryResult",
    "RelatedTo",
    "RemoteError",
    "RemoteObject",
    "Response",
    "RestClient",
    "Selected",
    "SuffixedBy",
    "create_query_executor",
    "default_mapper",
]
