# tests/test_kv_store.py

"""Tests for the SQLite key-value store."""

import tempfile
import unittest
from pathlib import Path

from sweetbloom.storage.kv_store import KeyValueStore


class TestKeyValueStore(unittest.TestCase):
    """Tests for the KeyValueStore class."""

    def setUp(self) -> None:
        """Create a temporary database for each test."""
        self._tmpdir = tempfile.TemporaryDirectory()
        self.db_path = Path(self._tmpdir.name) / "test.db"
        self.store = KeyValueStore(db_path=self.db_path)

    def tearDown(self) -> None:
        self.store.close()
        self._tmpdir.cleanup()

    def test_missing_key_is_none(self) -> None:
        self.assertIsNone(self.store.get("absent"))

    def test_set_and_get(self) -> None:
        self.store.set("k", "v")
        self.assertEqual(self.store.get("k"), "v")

    def test_set_overwrites(self) -> None:
        self.store.set("k", "one")
        self.store.set("k", "two")
        self.assertEqual(self.store.get("k"), "two")

    def test_delete(self) -> None:
        self.store.set("k", "v")
        self.assertTrue(self.store.delete("k"))
        self.assertIsNone(self.store.get("k"))
        self.assertFalse(self.store.delete("k"))

    def test_values_survive_reopen(self) -> None:
        """Data written by one instance is read by the next."""
        self.store.set("k", "persisté")
        self.store.close()
        self.store = KeyValueStore(db_path=self.db_path)
        self.assertEqual(self.store.get("k"), "persisté")

    def test_creates_parent_directory(self) -> None:
        nested = Path(self._tmpdir.name) / "a" / "b" / "kv.db"
        store = KeyValueStore(db_path=nested)
        try:
            self.assertTrue(nested.parent.is_dir())
        finally:
            store.close()
