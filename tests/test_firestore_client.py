# tests/test_firestore_client.py

"""Tests for the Firestore REST client and value decoding."""

import json
import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from sweetbloom.clients.firestore_client import (
    FirestoreClient,
    decode_document,
    decode_value,
)
from sweetbloom.errors import DataFetchError

_DOC_PREFIX = "projects/demo/databases/(default)/documents/products"


def _doc(doc_id: str, title: str, price: float, category: str) -> dict[str, Any]:
    """A Firestore document as the REST API returns it."""
    return {
        "name": f"{_DOC_PREFIX}/{doc_id}",
        "fields": {
            "title": {"stringValue": title},
            "price": {"doubleValue": price},
            "category": {"stringValue": category},
        },
    }


def _resp(status: int, body: Any) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = body if isinstance(body, str) else json.dumps(body)
    return resp


class TestDecodeValue(unittest.TestCase):
    """Typed Firestore values become plain Python values."""

    def test_scalars(self) -> None:
        self.assertEqual(decode_value({"stringValue": "x"}), "x")
        self.assertEqual(decode_value({"integerValue": "42"}), 42)
        self.assertEqual(decode_value({"doubleValue": 4.5}), 4.5)
        self.assertIs(decode_value({"booleanValue": True}), True)
        self.assertIsNone(decode_value({"nullValue": None}))

    def test_map_and_array(self) -> None:
        value = {
            "mapValue": {
                "fields": {
                    "tags": {
                        "arrayValue": {
                            "values": [
                                {"stringValue": "rose"},
                                {"integerValue": "12"},
                            ]
                        }
                    }
                }
            }
        }
        self.assertEqual(decode_value(value), {"tags": ["rose", 12]})

    def test_empty_array(self) -> None:
        self.assertEqual(decode_value({"arrayValue": {}}), [])


class TestDecodeDocument(unittest.TestCase):
    """Documents flatten to records keyed by their name's last segment."""

    def test_id_from_name(self) -> None:
        record = decode_document(_doc("abc", "Roses", 299.0, "fleurs"))
        self.assertEqual(record["id"], "abc")
        self.assertEqual(record["title"], "Roses")
        self.assertEqual(record["price"], 299.0)

    def test_name_overrides_stored_id(self) -> None:
        doc = _doc("abc", "Roses", 299.0, "fleurs")
        doc["fields"]["id"] = {"stringValue": "other"}
        self.assertEqual(decode_document(doc)["id"], "abc")


@patch("sweetbloom.clients.base_client.curl_requests.Session")
class TestFirestoreClient(unittest.TestCase):
    """FirestoreClient operations against a mocked HTTP session."""

    def _client(self, mock_session_cls: MagicMock) -> tuple[FirestoreClient, MagicMock]:
        session = MagicMock()
        mock_session_cls.return_value = session
        client = FirestoreClient()
        client.settings.FIREBASE_PROJECT_ID = "demo"
        client.settings.FIREBASE_API_KEY = ""
        return client, session

    def test_unconfigured_raises(self, mock_session_cls: MagicMock) -> None:
        client, session = self._client(mock_session_cls)
        client.settings.FIREBASE_PROJECT_ID = ""
        self.assertFalse(client.is_configured)
        with self.assertRaises(DataFetchError):
            client.list_documents("products")
        session.request.assert_not_called()

    def test_list_documents_follows_page_tokens(
        self, mock_session_cls: MagicMock,
    ) -> None:
        client, session = self._client(mock_session_cls)
        session.request.side_effect = [
            _resp(200, {
                "documents": [_doc("1", "Roses", 299.0, "fleurs")],
                "nextPageToken": "tok",
            }),
            _resp(200, {
                "documents": [_doc("2", "Truffes", 149.0, "chocolats")],
            }),
        ]

        records = client.list_documents("products")

        self.assertEqual([r["id"] for r in records], ["1", "2"])
        second_params = session.request.call_args_list[1].kwargs["params"]
        self.assertEqual(second_params["pageToken"], "tok")

    def test_list_documents_stops_at_max_pages(
        self, mock_session_cls: MagicMock,
    ) -> None:
        client, session = self._client(mock_session_cls)
        client.settings.MAX_PAGES = 2
        session.request.return_value = _resp(200, {
            "documents": [_doc("1", "Roses", 299.0, "fleurs")],
            "nextPageToken": "again",
        })

        records = client.list_documents("products")

        self.assertEqual(len(records), 2)
        self.assertEqual(session.request.call_count, 2)

    def test_empty_collection(self, mock_session_cls: MagicMock) -> None:
        client, session = self._client(mock_session_cls)
        session.request.return_value = _resp(200, {})
        self.assertEqual(client.list_documents("products"), [])

    def test_list_documents_failure_raises(
        self, mock_session_cls: MagicMock,
    ) -> None:
        client, session = self._client(mock_session_cls)
        session.request.return_value = _resp(500, "{}")
        with self.assertRaises(DataFetchError):
            client.list_documents("products")

    def test_query_equal_builds_field_filter(
        self, mock_session_cls: MagicMock,
    ) -> None:
        client, session = self._client(mock_session_cls)
        session.request.return_value = _resp(200, [
            {"document": _doc("2", "Truffes", 149.0, "chocolats")},
            {"readTime": "2026-01-01T00:00:00Z"},
        ])

        records = client.query_equal("products", "category", "chocolats")

        self.assertEqual([r["id"] for r in records], ["2"])
        args, kwargs = session.request.call_args
        self.assertEqual(args[0], "POST")
        self.assertTrue(args[1].endswith(":runQuery"))
        field_filter = kwargs["json"]["structuredQuery"]["where"]["fieldFilter"]
        self.assertEqual(field_filter["op"], "EQUAL")
        self.assertEqual(field_filter["value"], {"stringValue": "chocolats"})

    def test_query_equal_rejects_non_list(
        self, mock_session_cls: MagicMock,
    ) -> None:
        client, session = self._client(mock_session_cls)
        session.request.return_value = _resp(200, {"unexpected": True})
        with self.assertRaises(DataFetchError):
            client.query_equal("products", "category", "fleurs")

    def test_get_document(self, mock_session_cls: MagicMock) -> None:
        client, session = self._client(mock_session_cls)
        session.request.return_value = _resp(
            200, _doc("7", "Fraisier", 180.0, "gateaux")
        )
        record = client.get_document("products", "7")
        assert record is not None
        self.assertEqual(record["title"], "Fraisier")

    def test_get_document_not_found(self, mock_session_cls: MagicMock) -> None:
        client, session = self._client(mock_session_cls)
        session.request.return_value = _resp(404, {"error": {"code": 404}})
        self.assertIsNone(client.get_document("products", "missing"))
        self.assertEqual(session.request.call_count, 1)

    def test_get_document_escapes_id(self, mock_session_cls: MagicMock) -> None:
        """Slashes in an id cannot address another path."""
        client, session = self._client(mock_session_cls)
        session.request.return_value = _resp(404, "{}")
        client.get_document("products", "../users/1")
        url = session.request.call_args.args[1]
        self.assertTrue(url.endswith("/products/..%2Fusers%2F1"))

    def test_list_documents_rejects_array_body(
        self, mock_session_cls: MagicMock,
    ) -> None:
        client, session = self._client(mock_session_cls)
        session.request.return_value = _resp(200, "[]")
        with self.assertRaises(DataFetchError):
            client.list_documents("products")

    def test_list_documents_rejects_non_list_documents(
        self, mock_session_cls: MagicMock,
    ) -> None:
        client, session = self._client(mock_session_cls)
        session.request.return_value = _resp(200, {"documents": "oops"})
        with self.assertRaises(DataFetchError):
            client.list_documents("products")

    def test_malformed_document_raises_fetch_error(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """A bad integerValue or a non-object document is a fetch failure."""
        client, session = self._client(mock_session_cls)
        bad_int = _doc("1", "Roses", 299.0, "fleurs")
        bad_int["fields"]["reviewCount"] = {"integerValue": "beaucoup"}
        for documents in ([bad_int], ["not-a-document"]):
            session.request.return_value = _resp(200, {"documents": documents})
            with self.assertRaises(DataFetchError):
                client.list_documents("products")

    def test_get_document_rejects_array_body(
        self, mock_session_cls: MagicMock,
    ) -> None:
        client, session = self._client(mock_session_cls)
        session.request.return_value = _resp(200, "[1, 2]")
        with self.assertRaises(DataFetchError):
            client.get_document("products", "7")
