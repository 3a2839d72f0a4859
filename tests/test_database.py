import asyncio

import pytest

from database.mongodb import LOOKUP_INDEXES, Database


class TestDatabase:

    def test_get_db_before_connect_raises(self):
        with pytest.raises(RuntimeError):
            Database().get_db()

    def test_ensure_indexes_is_idempotent(self, fake_db):
        database = Database()
        database.db = fake_db
        names = asyncio.run(database.ensure_indexes())
        asyncio.run(database.ensure_indexes())
        assert len(names) == len(LOOKUP_INDEXES)
        assert fake_db["documents"].indexes == ["certificate_ids", "doc_type"]
        assert fake_db["aircrafts"].indexes == ["fleet_id", "serial_number"]
