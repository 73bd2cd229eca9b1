"""Tests for combining queries with logical AND / OR."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from CloudQuery.core.constraints import DESCENDING, EXISTED, INCLUDED, EqualTo, GreaterThan
from CloudQuery.core.errors import InconsistentClassError
from CloudQuery.core.query import Query


def _left() -> Query:
    return Query("Post").where_key("status", EqualTo("draft"))


def _right() -> Query:
    return Query("Post").where_key("likes", GreaterThan(10))


class TestLogicCombination(unittest.TestCase):
    def test_logic_and_wraps_both_documents(self) -> None:
        combined = _left().logic_and(_right())

        self.assertEqual(
            combined.json_value(),
            {
                "className": "Post",
                "where": {"$and": [{"$and": [{"status": "draft"}]}, {"likes": {"$gt": 10}}]},
            },
        )

    def test_logic_or_wraps_both_documents(self) -> None:
        combined = _left().logic_or(_right())

        self.assertEqual(
            combined.json_value()["where"],
            {"$or": [{"$and": [{"status": "draft"}]}, {"likes": {"$gt": 10}}]},
        )

    def test_operators(self) -> None:
        self.assertEqual((_left() & _right()).json_value(), _left().logic_and(_right()).json_value())
        self.assertEqual((_left() | _right()).json_value(), _left().logic_or(_right()).json_value())

    def test_operator_with_non_query_is_type_error(self) -> None:
        with self.assertRaises(TypeError):
            _left() & 1  # noqa: B018
        with self.assertRaises(TypeError):
            _left() | "x"  # noqa: B018

    def test_later_mutation_of_operands_does_not_leak(self) -> None:
        left = _left()
        right = _right()
        combined = left | right
        before = combined.json_value()

        left.where_key("status", EqualTo("published"))
        left.where_key("title", EXISTED)
        right.where_key("likes", GreaterThan(99))

        self.assertEqual(combined.json_value(), before)

    def test_operands_are_not_mutated(self) -> None:
        left = _left()
        before = left.json_value()

        left.logic_and(_right())

        self.assertEqual(left.json_value(), before)

    def test_pagination_ordering_and_projection_are_discarded(self) -> None:
        left = _left()
        left.limit = 5
        left.skip = 10
        left.where_key("createdAt", DESCENDING)
        left.where_key("author", INCLUDED)

        combined = left & _right()

        self.assertEqual(set(combined.json_value()), {"className", "where"})
        self.assertIsNone(combined.limit)
        self.assertIsNone(combined.skip)

    def test_combined_query_can_be_combined_again(self) -> None:
        nested = (_left() | _right()) & Query("Post").where_key("title", EXISTED)

        self.assertEqual(
            nested.json_value()["where"],
            {
                "$and": [
                    {"$or": [{"$and": [{"status": "draft"}]}, {"likes": {"$gt": 10}}]},
                    {"title": {"$exists": True}},
                ]
            },
        )

    def test_combining_unconstrained_queries(self) -> None:
        combined = Query("Post") & Query("Post")

        self.assertEqual(combined.json_value()["where"], {"$and": [{}, {}]})

    def test_mismatched_class_names_fail(self) -> None:
        with self.assertRaises(InconsistentClassError) as ctx:
            _left().logic_and(Query("Comment"))
        self.assertIsInstance(ctx.exception, ValueError)
        self.assertEqual((ctx.exception.left, ctx.exception.right), ("Post", "Comment"))

        with self.assertRaises(InconsistentClassError):
            _left() | Query("Comment")


if __name__ == "__main__":
    unittest.main()
