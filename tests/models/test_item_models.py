"""Tests for item models"""
from bson import ObjectId

from src.models.item import ItemDB


class TestItemDB:

    def test_reads_mongo_id_and_exposes_id(self):
        oid = ObjectId()

        item = ItemDB(**{"_id": oid, "title": "Ficciones", "author": "Borges"})
        dumped = item.model_dump()

        assert item.id == str(oid)
        assert dumped["id"] == str(oid)
        assert "_id" not in dumped
        assert "_id" not in item.model_dump(by_alias=True)

    def test_accepts_plain_id(self):
        item = ItemDB(id="abc", title="Rayuela", author="Cortázar")

        assert item.id == "abc"
