import io
import json
from urllib.parse import parse_qs, urlsplit

import pytest

from oaiclient.threads import (
    ChunkingStrategy,
    ChunkingStrategyType,
    CodeInterpreterToolResources,
    FileSearchToolResourcesRequest,
    ModifyThreadRequest,
    StaticChunkingStrategy,
    Thread,
    ThreadAttachment,
    ThreadDeleteResponse,
    ThreadMessage,
    ThreadMessageRole,
    ThreadRequest,
    ThreadsClient,
    ToolResources,
    ToolResourcesRequest,
    VectorStoreToolResources,
)
from oaiclient.transport import Transport

THREAD_ID = "thread_abc123"


class _FakeResponse(io.BytesIO):
    def __init__(self, body, status=200, headers=None):
        super().__init__(body)
        self.status = status
        self.headers = headers or {}
        self.reason = ""


class _FakeServer:
    def __init__(self):
        self.handlers = {}
        self.requests = []

    def register(self, path, handler):
        self.handlers[path] = handler

    def __call__(self, req, timeout=None):
        self.requests.append(req)
        path = urlsplit(req.full_url).path
        body, headers = self.handlers[path](req)
        return _FakeResponse(body, 200, headers)


def _thread_body(metadata=None):
    return json.dumps(
        {"id": THREAD_ID, "object": "thread", "created_at": 1234567890, "metadata": metadata}
    ).encode()


def _thread_item_handler(req):
    method = req.get_method()
    if method in ("GET", "POST"):
        metadata = None
        if method == "POST":
            metadata = json.loads(req.data).get("metadata")
        return _thread_body(metadata), {"x-ratelimit-limit-requests": "60"}
    return (
        b'{"id": "thread_abc123", "object": "thread.deleted", "deleted": true}',
        {},
    )


def _threads_handler(req):
    request = json.loads(req.data)
    return _thread_body(request.get("metadata")), {}


def _client(prefix="/v1", **kwargs):
    server = _FakeServer()
    server.register(f"{prefix}/threads/{THREAD_ID}", _thread_item_handler)
    server.register(f"{prefix}/threads", _threads_handler)
    base = "http://test.local/v1" if prefix == "/v1" else "http://test.local"
    transport = Transport("token", base, opener=server, **kwargs)
    return ThreadsClient(transport), server


def test_create_thread():
    client, server = _client()
    thread = client.create_thread(
        ThreadRequest(messages=[ThreadMessage(role=ThreadMessageRole.USER, content="Hello, World!")])
    )
    assert thread.id == THREAD_ID
    assert thread.object == "thread"
    assert thread.created_at == 1234567890
    req = server.requests[0]
    assert req.get_method() == "POST"
    assert json.loads(req.data) == {"messages": [{"role": "user", "content": "Hello, World!"}]}
    assert req.get_header("Openai-beta") == "assistants=v2"
    assert req.get_header("Authorization") == "Bearer token"


def test_retrieve_thread_reads_rate_limits():
    client, server = _client()
    thread = client.retrieve_thread(THREAD_ID)
    assert thread.id == THREAD_ID
    assert thread.rate_limits.limit_requests == 60
    assert server.requests[0].get_method() == "GET"
    assert server.requests[0].full_url == f"http://test.local/v1/threads/{THREAD_ID}"


def test_modify_thread_sends_metadata():
    client, server = _client()
    thread = client.modify_thread(THREAD_ID, ModifyThreadRequest(metadata={"key": "value"}))
    assert thread.metadata == {"key": "value"}
    assert json.loads(server.requests[0].data) == {"metadata": {"key": "value"}}


def test_delete_thread():
    client, server = _client()
    result = client.delete_thread(THREAD_ID)
    assert result == ThreadDeleteResponse(id=THREAD_ID, object="thread.deleted", deleted=True)
    assert server.requests[0].get_method() == "DELETE"


def test_azure_thread_endpoints():
    client, server = _client(prefix="/openai", api_version="2023-05-15")
    created = client.create_thread(
        ThreadRequest(messages=[ThreadMessage(role=ThreadMessageRole.USER, content="Hello, World!")])
    )
    retrieved = client.retrieve_thread(THREAD_ID)
    modified = client.modify_thread(THREAD_ID, ModifyThreadRequest(metadata={"key": "value"}))
    deleted = client.delete_thread(THREAD_ID)
    assert created.id == retrieved.id == modified.id == THREAD_ID
    assert modified.metadata == {"key": "value"}
    assert deleted.deleted is True
    query = parse_qs(urlsplit(server.requests[1].full_url).query)
    assert query == {"api-version": ["2023-05-15"]}
    assert server.requests[1].get_header("Api-key") == "token"


def test_modify_request_without_metadata_sends_null():
    assert ModifyThreadRequest().to_dict() == {"metadata": None}


def test_thread_message_serialises_optional_fields():
    message = ThreadMessage(
        role=ThreadMessageRole.ASSISTANT,
        content="hi",
        attachments=[ThreadAttachment(file_id="file-1", tools=["file_search"])],
        metadata={"a": 1},
    )
    assert message.to_dict() == {
        "role": "assistant",
        "content": "hi",
        "attachments": [{"file_id": "file-1", "tools": [{"type": "file_search"}]}],
        "metadata": {"a": 1},
    }


def test_tool_resources_round_trip():
    resources = ToolResources(code_interpreter=CodeInterpreterToolResources(file_ids=["f1", "f2"]))
    assert ToolResources.from_dict(resources.to_dict()) == resources


def test_tool_resources_request_with_vector_stores():
    request = ToolResourcesRequest(
        file_search=FileSearchToolResourcesRequest(
            vector_stores=[
                VectorStoreToolResources(
                    file_ids=["f1"],
                    chunking_strategy=ChunkingStrategy(
                        type=ChunkingStrategyType.STATIC,
                        static=StaticChunkingStrategy(800, 400),
                    ),
                )
            ]
        )
    )
    assert request.to_dict() == {
        "file_search": {
            "vector_stores": [
                {
                    "file_ids": ["f1"],
                    "chunking_strategy": {
                        "type": "static",
                        "static": {"max_chunk_size_tokens": 800, "chunk_overlap_tokens": 400},
                    },
                }
            ]
        }
    }


def test_thread_from_dict_defaults():
    thread = Thread.from_dict({"id": "t"})
    assert thread.created_at == 0
    assert thread.tool_resources == ToolResources()


def test_empty_thread_request_is_empty_object():
    assert ThreadRequest().to_dict() == {}


def test_server_error_raises():
    import urllib.error

    def failing(req, timeout=None):
        return _FakeResponse(b'{"error": {}}', status=404)

    client = ThreadsClient(Transport("token", "http://test.local/v1", opener=failing))
    with pytest.raises(urllib.error.HTTPError) as info:
        client.retrieve_thread("missing")
    assert info.value.code == 404