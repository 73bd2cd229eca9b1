"""Tests for materializing result documents into objects."""

import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from CloudQuery.core.models import ObjectMapper, RemoteObject


class _Post(RemoteObject):
    pass


class TestObjectMapper(unittest.TestCase):
    def test_reserved_fields_and_attributes(self) -> None:
        mapper = ObjectMapper()
        obj = mapper.materialize(
            "Post",
            {
                "objectId": "p1",
                "createdAt": "2016-04-19T08:00:00.000Z",
                "updatedAt": "2016-04-20T08:00:00.000Z",
                "title": "hello",
                "likes": 3,
            },
        )

        self.assertEqual(obj.class_name, "Post")
        self.assertEqual(obj.object_id, "p1")
        self.assertEqual(obj.created_at, datetime(2016, 4, 19, 8, 0, tzinfo=timezone.utc))
        self.assertEqual(obj.updated_at, datetime(2016, 4, 20, 8, 0, tzinfo=timezone.utc))
        self.assertEqual(obj.attributes, {"title": "hello", "likes": 3})
        self.assertEqual(obj["title"], "hello")
        self.assertIsNone(obj.get("missing"))

    def test_typed_values_are_decoded(self) -> None:
        mapper = ObjectMapper()
        obj = mapper.materialize(
            "Post",
            {
                "publishedAt": {"__type": "Date", "iso": "2016-04-19T08:00:00.000Z"},
                "author": {"__type": "Pointer", "className": "_User", "objectId": "u1"},
                "tags": [{"__type": "Date", "iso": "2016-04-19T08:00:00.000Z"}],
            },
        )

        self.assertEqual(obj["publishedAt"], datetime(2016, 4, 19, 8, 0, tzinfo=timezone.utc))
        self.assertIsInstance(obj["author"], RemoteObject)
        self.assertEqual((obj["author"].class_name, obj["author"].object_id), ("_User", "u1"))
        self.assertEqual(obj["tags"], [datetime(2016, 4, 19, 8, 0, tzinfo=timezone.utc)])

    def test_registered_factory_is_used(self) -> None:
        mapper = ObjectMapper()
        mapper.register("Post", _Post)

        self.assertIsInstance(mapper.materialize("Post", {}), _Post)
        self.assertIs(type(mapper.materialize("Comment", {})), RemoteObject)

    def test_apply_updates_existing_object(self) -> None:
        mapper = ObjectMapper()
        obj = RemoteObject("Post", object_id="p1", attributes={"title": "old"})

        mapper.apply(obj, {"title": "new", "likes": 1})

        self.assertEqual(obj.object_id, "p1")
        self.assertEqual(obj.attributes, {"title": "new", "likes": 1})


if __name__ == "__main__":
    unittest.main()
