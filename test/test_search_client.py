"""Tests for SearchClient lifecycle and document operations."""

import json
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from FileSearch.config import AppConfig, EngineConfig, RuntimeConfig
from FileSearch.core.fields import field_ref
from FileSearch.core.models import Attachment, Document
from FileSearch.core.request import HighlightFieldSpec, HighlightSpec, RequestSpec, match_query
from FileSearch.engine.response import EngineResponse
from FileSearch.errors import ConfigurationError, ConstructionError, QueryError, TransportError
from FileSearch.services import SearchClient, build_index_body, create_search_client

NODE = "http://localhost:9200"
CONTENT = field_ref(Document, "attachment.content")


def _response(method, url, status_code, body=None, request_body=None):
    text = json.dumps(body) if body is not None else ""
    return EngineResponse(
        method=method,
        url=url,
        status_code=status_code,
        request_body=json.dumps(request_body) if request_body is not None else None,
        text=text,
        body=body,
    )


class _InMemoryEngine:
    """Single-node engine double storing documents per index."""

    def __init__(self, *, exists=False, create_status=200, search_status=200):
        self.exists = exists
        self.create_status = create_status
        self.search_status = search_status
        self.docs = {}
        self.calls = []
        self.created_bodies = []
        self.write_params = []
        self.closed = False

    def index_exists(self, index):
        self.calls.append(("index_exists", index))
        return self.exists

    def create_index(self, index, body):
        self.calls.append(("create_index", index))
        self.created_bodies.append(body)
        if self.create_status == 200:
            self.exists = True
            return _response("PUT", f"{NODE}/{index}", 200, {"acknowledged": True, "index": index})
        return _response(
            "PUT",
            f"{NODE}/{index}",
            self.create_status,
            {"error": {"type": "resource_already_exists_exception", "reason": "exists"}},
        )

    def search(self, index, body):
        self.calls.append(("search", index))
        if self.search_status != 200:
            return _response(
                "POST",
                f"{NODE}/{index}/_search",
                self.search_status,
                {"error": {"type": "parsing_exception", "reason": "bad query"}},
                request_body=body,
            )
        clauses = body.get("query", {}).get("match", {})
        hits = []
        for doc_id, source in self.docs.items():
            if all(self._matches(source, path, params.get("query", "")) for path, params in clauses.items()):
                hits.append({"_index": index, "_id": str(doc_id), "_score": 1.0, "_source": source})
        return _response("POST", f"{NODE}/{index}/_search", 200, {"hits": {"total": len(hits), "hits": hits}})

    def index_document(self, index, doc_id, source, *, pipeline=None, refresh=None):
        self.calls.append(("index_document", index))
        self.write_params.append({"pipeline": pipeline, "refresh": refresh})
        result = "updated" if doc_id in self.docs else "created"
        self.docs[doc_id] = dict(source)
        return _response(
            "PUT",
            f"{NODE}/{index}/_doc/{doc_id}",
            201 if result == "created" else 200,
            {"_index": index, "_id": str(doc_id), "_version": 1, "result": result},
        )

    def delete_document(self, index, doc_id):
        self.calls.append(("delete_document", index))
        if doc_id not in self.docs:
            return _response(
                "DELETE",
                f"{NODE}/{index}/_doc/{doc_id}",
                404,
                {"_index": index, "_id": str(doc_id), "result": "not_found"},
            )
        del self.docs[doc_id]
        return _response(
            "DELETE",
            f"{NODE}/{index}/_doc/{doc_id}",
            200,
            {"_index": index, "_id": str(doc_id), "_version": 2, "result": "deleted"},
        )

    def close(self):
        self.closed = True

    @staticmethod
    def _matches(source, path, text):
        value = source
        for part in path.split("."):
            if not isinstance(value, dict):
                return False
            value = value.get(part)
        return isinstance(value, str) and text.lower() in value.lower()


class _FailingEngine(_InMemoryEngine):
    def index_exists(self, index):
        self.calls.append(("index_exists", index))
        raise TransportError("Connection refused")


class _AsyncEngine:
    """Async wrapper delegating to an in-memory engine."""

    def __init__(self, engine):
        self.engine = engine
        self.closed = False

    async def search(self, index, body):
        return self.engine.search(index, body)

    async def index_document(self, index, doc_id, source, *, pipeline=None, refresh=None):
        return self.engine.index_document(index, doc_id, source, pipeline=pipeline, refresh=refresh)

    async def delete_document(self, index, doc_id):
        return self.engine.delete_document(index, doc_id)

    async def aclose(self):
        self.closed = True


def _doc(doc_id, content):
    return Document(id=doc_id, content_base64="", attachment=Attachment(content=content))


class TestSearchClientConstruction(unittest.TestCase):
    def test_empty_index_name_fails_before_io(self) -> None:
        engine = _InMemoryEngine()
        with self.assertRaises(ConfigurationError):
            SearchClient("", NODE, api_client=engine)
        self.assertEqual(engine.calls, [])

    def test_missing_node_fails_before_io(self) -> None:
        engine = _InMemoryEngine()
        for node in (None, "", "   "):
            with self.subTest(node=node):
                with self.assertRaises(ConfigurationError):
                    SearchClient("files", node, api_client=engine)
        self.assertEqual(engine.calls, [])

    def test_malformed_node_fails_before_io(self) -> None:
        engine = _InMemoryEngine()
        with self.assertRaises(ConfigurationError):
            SearchClient("files", "localhost:9200", api_client=engine)
        self.assertEqual(engine.calls, [])

    def test_bad_path_delimiter_fails_before_io(self) -> None:
        engine = _InMemoryEngine()
        with self.assertRaises(ConfigurationError):
            SearchClient("files", NODE, path_delimiter="//", api_client=engine)
        self.assertEqual(engine.calls, [])

    def test_node_address_is_stripped(self) -> None:
        client = SearchClient("files", f"  {NODE}  ", api_client=_InMemoryEngine(exists=True))
        self.assertEqual(client.node, NODE)

    def test_configuration_error_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            SearchClient("", NODE, api_client=_InMemoryEngine())

    def test_creates_missing_index_with_path_analyzer(self) -> None:
        engine = _InMemoryEngine(exists=False)

        client = SearchClient("files", NODE, api_client=engine)

        self.assertEqual(engine.calls, [("index_exists", "files"), ("create_index", "files")])
        self.assertEqual(engine.created_bodies, [build_index_body("\\")])
        analysis = engine.created_bodies[0]["settings"]["analysis"]
        self.assertEqual(
            analysis["analyzer"]["windows_path_hierarchy_analyzer"],
            {"type": "custom", "tokenizer": "windows_path_hierarchy_tokenizer"},
        )
        self.assertEqual(
            analysis["tokenizer"]["windows_path_hierarchy_tokenizer"],
            {"type": "path_hierarchy", "delimiter": "\\"},
        )
        self.assertEqual(client.index_name, "files")
        self.assertEqual(client.node, NODE)

    def test_custom_path_delimiter(self) -> None:
        engine = _InMemoryEngine(exists=False)
        SearchClient("files", NODE, path_delimiter="/", api_client=engine)
        tokenizer = engine.created_bodies[0]["settings"]["analysis"]["tokenizer"]
        self.assertEqual(tokenizer["windows_path_hierarchy_tokenizer"]["delimiter"], "/")

    def test_existing_index_is_not_recreated(self) -> None:
        engine = _InMemoryEngine(exists=True)
        SearchClient("files", NODE, api_client=engine)
        self.assertEqual(engine.calls, [("index_exists", "files")])

    def test_existence_check_failure_is_construction_error(self) -> None:
        with self.assertRaisesRegex(ConstructionError, "Connection refused"):
            SearchClient("files", NODE, api_client=_FailingEngine())

    def test_rejected_creation_is_construction_error(self) -> None:
        with self.assertRaisesRegex(ConstructionError, "resource_already_exists_exception"):
            SearchClient("files", NODE, api_client=_InMemoryEngine(create_status=400))

    def test_settings_are_read_only(self) -> None:
        client = SearchClient("files", NODE, api_client=_InMemoryEngine(exists=True))
        with self.assertRaises(AttributeError):
            client.index_name = "other"  # type: ignore[misc]

    def test_context_manager_closes_client(self) -> None:
        engine = _InMemoryEngine(exists=True)
        with SearchClient("files", NODE, api_client=engine):
            pass
        self.assertTrue(engine.closed)

    def test_create_from_config(self) -> None:
        engine = _InMemoryEngine(exists=False)
        config = AppConfig(
            runtime=RuntimeConfig(level="INFO", to_file=False, dir="log"),
            engine=EngineConfig(node=NODE, index_name="documents", path_delimiter="/", timeout=5.0),
        )

        client = create_search_client(config, api_client=engine)

        self.assertEqual(client.index_name, "documents")
        self.assertEqual(client.path_delimiter, "/")
        self.assertEqual(engine.calls[-1], ("create_index", "documents"))


class TestSearchClientOperations(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = _InMemoryEngine(exists=True)
        self.client = SearchClient("files", NODE, api_client=self.engine)

    def test_insert_then_search(self) -> None:
        ack = self.client.insert_doc(_doc(1, "quarterly invoice"))

        hits = self.client.search(RequestSpec(query=match_query(CONTENT, "invoice")))

        self.assertEqual(ack.id, "1")
        self.assertEqual(ack.index, "files")
        self.assertEqual(ack.result, "created")
        self.assertEqual(ack.version, 1)
        self.assertEqual(ack.status_code, 201)
        self.assertEqual([hit.id for hit in hits], ["1"])
        self.assertIsInstance(hits[0].document, Document)
        self.assertEqual(hits[0].document.attachment.content, "quarterly invoice")
        self.assertEqual(tuple(hits[0].highlights), ())

    def test_insert_uses_attachment_pipeline_and_waits_for_refresh(self) -> None:
        self.client.insert_doc(_doc(1, "x"))
        self.assertEqual(self.engine.write_params, [{"pipeline": "attachment", "refresh": "wait_for"}])
        self.assertEqual(self.engine.docs[1], {"id": 1, "contentBase64": "", "attachment": {"content": "x"}})

    def test_delete_then_search(self) -> None:
        self.client.insert_doc(_doc(1, "invoice"))
        self.client.insert_doc(_doc(2, "invoice copy"))

        ack = self.client.delete_doc(1)
        hits = self.client.search(RequestSpec(query=match_query(CONTENT, "invoice")))

        self.assertEqual(ack.result, "deleted")
        self.assertEqual(ack.id, "1")
        self.assertEqual([hit.id for hit in hits], ["2"])

    def test_delete_missing_document_raises_transport_error(self) -> None:
        with self.assertRaises(TransportError):
            self.client.delete_doc(42)

    def test_search_failure_raises_query_error_with_debug_information(self) -> None:
        self.engine.search_status = 400

        with self.assertRaises(QueryError) as ctx:
            self.client.search(RequestSpec(query=match_query(CONTENT, "x")))

        err = ctx.exception
        self.assertIn("parsing_exception: bad query", str(err))
        self.assertIn("Invalid engine response built from an unsuccessful (400)", err.debug_information)
        self.assertIn('"attachment.content"', err.debug_information)

    def test_search_with_raw_documents(self) -> None:
        client = SearchClient("files", NODE, api_client=self.engine, document_factory=None)
        self.client.insert_doc(_doc(3, "report"))

        hits = client.search(RequestSpec(query=match_query(CONTENT, "report"), highlight=HighlightSpec(
            fields=(HighlightFieldSpec(field=CONTENT),),
        )))

        self.assertEqual(hits[0].document["id"], 3)

    def test_source_without_id_takes_hit_id(self) -> None:
        self.engine.docs[5] = {"attachment": {"content": "invoice"}}

        hits = self.client.search(RequestSpec(query=match_query(CONTENT, "invoice")))

        self.assertEqual([hit.id for hit in hits], ["5"])
        self.assertEqual(hits[0].document.id, 5)

    def test_unconvertible_hit_raises_query_error(self) -> None:
        self.engine.docs["AX-9"] = {"attachment": {"content": "invoice"}}

        with self.assertRaisesRegex(QueryError, "cannot be converted") as ctx:
            self.client.search(RequestSpec(query=match_query(CONTENT, "invoice")))

        self.assertIsInstance(ctx.exception.__cause__, ValueError)


class TestSearchClientAsync(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.engine = _InMemoryEngine(exists=True)
        self.async_engine = _AsyncEngine(self.engine)
        self.client = SearchClient("files", NODE, api_client=self.engine, async_api_client=self.async_engine)

    async def test_insert_search_delete(self) -> None:
        ack = await self.client.insert_doc_async(_doc(1, "contract draft"))
        hits = await self.client.search_async(RequestSpec(query=match_query(CONTENT, "contract")))
        deleted = await self.client.delete_doc_async(1)
        after = await self.client.search_async(RequestSpec(query=match_query(CONTENT, "contract")))

        self.assertEqual(ack.result, "created")
        self.assertEqual([hit.id for hit in hits], ["1"])
        self.assertEqual(deleted.result, "deleted")
        self.assertEqual(after, [])

    async def test_async_search_failure_raises_query_error(self) -> None:
        self.engine.search_status = 500
        with self.assertRaises(QueryError):
            await self.client.search_async(RequestSpec(query=match_query(CONTENT, "x")))

    async def test_async_context_manager_closes_both_clients(self) -> None:
        async with self.client:
            pass
        self.assertTrue(self.engine.closed)
        self.assertTrue(self.async_engine.closed)

    async def test_sync_close_after_async_use_warns(self) -> None:
        await self.client.search_async(RequestSpec(query=match_query(CONTENT, "x")))

        with self.assertLogs("FileSearch", level="WARNING") as captured:
            self.client.close()

        self.assertIn("aclose()", captured.output[0])
        self.assertTrue(self.engine.closed)
        self.assertFalse(self.async_engine.closed)
        await self.client.aclose()
        self.assertTrue(self.async_engine.closed)


if __name__ == "__main__":
    unittest.main()
