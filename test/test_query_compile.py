"""Tests for compiling a query into its wire and request forms."""

import json
import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from CloudQuery.core.constraints import ASCENDING, INCLUDED, SELECTED, ContainedIn, EqualTo, GreaterThan
from CloudQuery.core.errors import EncodingError
from CloudQuery.core.models import RemoteObject
from CloudQuery.core.query import Query


class TestJsonValue(unittest.TestCase):
    def test_empty_query_compiles_to_class_name_only(self) -> None:
        self.assertEqual(Query("Post").json_value(), {"className": "Post"})

    def test_every_optional_key_present(self) -> None:
        query = Query("Post")
        query.where_key("likes", GreaterThan(1))
        query.where_key("author", INCLUDED)
        query.where_key("title", SELECTED)
        query.where_key("createdAt", ASCENDING)
        query.limit = 10
        query.skip = 20

        self.assertEqual(
            query.json_value(),
            {
                "className": "Post",
                "where": {"likes": {"$gt": 1}},
                "include": "author",
                "keys": "title",
                "order": "createdAt",
                "limit": 10,
                "skip": 20,
            },
        )

    def test_zero_limit_and_skip_are_kept(self) -> None:
        query = Query("Post")
        query.limit = 0
        query.skip = 0

        self.assertEqual(query.json_value(), {"className": "Post", "limit": 0, "skip": 0})

    def test_empty_class_name_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Query("")

    def test_where_key_chains(self) -> None:
        query = Query("Post").where_key("a", GreaterThan(1)).where_key("b", GreaterThan(2))

        self.assertEqual(query.json_value()["where"], {"a": {"$gt": 1}, "b": {"$gt": 2}})


class TestRequestParameters(unittest.TestCase):
    def test_where_is_serialized_compactly(self) -> None:
        query = Query("Post").where_key("likes", GreaterThan(1))
        query.limit = 5

        parameters = query.request_parameters()

        self.assertEqual(parameters, {"className": "Post", "where": '{"likes":{"$gt":1}}', "limit": 5})

    def test_non_ascii_is_preserved(self) -> None:
        query = Query("Post").where_key("title", EqualTo("café"))

        self.assertEqual(query.request_parameters()["where"], '{"$and":[{"title":"café"}]}')

    def test_no_where_when_unconstrained(self) -> None:
        self.assertNotIn("where", Query("Post").request_parameters())

    def test_request_parameters_do_not_change_json_value(self) -> None:
        query = Query("Post").where_key("likes", GreaterThan(1))
        query.request_parameters()

        self.assertEqual(query.json_value()["where"], {"likes": {"$gt": 1}})


class TestEncoding(unittest.TestCase):
    def test_dates_and_pointers_are_typed(self) -> None:
        query = Query("Post")
        query.where_key("publishedAt", GreaterThan(datetime(2016, 4, 19, 8, 0, tzinfo=timezone.utc)))
        query.where_key("author", EqualTo(RemoteObject("_User", object_id="u1")))

        self.assertEqual(
            json.loads(query.request_parameters()["where"]),
            {
                "publishedAt": {"$gt": {"__type": "Date", "iso": "2016-04-19T08:00:00.000Z"}},
                "$and": [{"author": {"__type": "Pointer", "className": "_User", "objectId": "u1"}}],
            },
        )

    def test_unencodable_value_fails_at_compile_time(self) -> None:
        query = Query("Post")
        query.where_key("tags", ContainedIn([1, object()]))

        with self.assertRaises(EncodingError):
            query.json_value()
        with self.assertRaises(EncodingError):
            query.request_parameters()

    def test_unsaved_object_cannot_be_referenced(self) -> None:
        query = Query("Post").where_key("author", EqualTo(RemoteObject("_User")))

        with self.assertRaises(EncodingError):
            query.json_value()


if __name__ == "__main__":
    unittest.main()
