"""Assistant threads: data types and the client for the threads endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .ratelimit import RateLimitHeaders
from .transport import Transport

THREADS_PATH = "/threads"


def _text(value: Any) -> str:
    """The plain string of an enum member or string."""
    return str(value.value) if isinstance(value, Enum) else str(value)


class ThreadMessageRole(str, Enum):
    ASSISTANT = "assistant"
    USER = "user"


class ChunkingStrategyType(str, Enum):
    AUTO = "auto"
    STATIC = "static"


@dataclass
class StaticChunkingStrategy:
    max_chunk_size_tokens: int = 0
    chunk_overlap_tokens: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_chunk_size_tokens": self.max_chunk_size_tokens,
            "chunk_overlap_tokens": self.chunk_overlap_tokens,
        }


@dataclass
class ChunkingStrategy:
    type: ChunkingStrategyType | str = ChunkingStrategyType.AUTO
    static: StaticChunkingStrategy | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": _text(self.type)}
        if self.static is not None:
            data["static"] = self.static.to_dict()
        return data


@dataclass
class VectorStoreToolResources:
    file_ids: list[str] = field(default_factory=list)
    chunking_strategy: ChunkingStrategy | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.file_ids:
            data["file_ids"] = list(self.file_ids)
        if self.chunking_strategy is not None:
            data["chunking_strategy"] = self.chunking_strategy.to_dict()
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


@dataclass
class CodeInterpreterToolResources:
    file_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"file_ids": list(self.file_ids)} if self.file_ids else {}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CodeInterpreterToolResources:
        return cls(file_ids=list(data.get("file_ids") or []))


@dataclass
class FileSearchToolResources:
    vector_store_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"vector_store_ids": list(self.vector_store_ids)} if self.vector_store_ids else {}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FileSearchToolResources:
        return cls(vector_store_ids=list(data.get("vector_store_ids") or []))


@dataclass
class ToolResources:
    code_interpreter: CodeInterpreterToolResources | None = None
    file_search: FileSearchToolResources | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.code_interpreter is not None:
            data["code_interpreter"] = self.code_interpreter.to_dict()
        if self.file_search is not None:
            data["file_search"] = self.file_search.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ToolResources:
        data = data or {}
        code = data.get("code_interpreter")
        search = data.get("file_search")
        return cls(
            code_interpreter=None if code is None else CodeInterpreterToolResources.from_dict(code),
            file_search=None if search is None else FileSearchToolResources.from_dict(search),
        )


@dataclass
class CodeInterpreterToolResourcesRequest:
    file_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"file_ids": list(self.file_ids)} if self.file_ids else {}


@dataclass
class FileSearchToolResourcesRequest:
    vector_store_ids: list[str] = field(default_factory=list)
    vector_stores: list[VectorStoreToolResources] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.vector_store_ids:
            data["vector_store_ids"] = list(self.vector_store_ids)
        if self.vector_stores:
            data["vector_stores"] = [store.to_dict() for store in self.vector_stores]
        return data


@dataclass
class ToolResourcesRequest:
    code_interpreter: CodeInterpreterToolResourcesRequest | None = None
    file_search: FileSearchToolResourcesRequest | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.code_interpreter is not None:
            data["code_interpreter"] = self.code_interpreter.to_dict()
        if self.file_search is not None:
            data["file_search"] = self.file_search.to_dict()
        return data


@dataclass
class ThreadAttachment:
    """A file attached to a message, with the tool types that may use it."""

    file_id: str
    tools: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"file_id": self.file_id, "tools": [{"type": _text(t)} for t in self.tools]}


@dataclass
class ThreadMessage:
    role: ThreadMessageRole | str
    content: str
    file_ids: list[str] = field(default_factory=list)
    attachments: list[ThreadAttachment] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"role": _text(self.role), "content": self.content}
        if self.file_ids:
            data["file_ids"] = list(self.file_ids)
        if self.attachments:
            data["attachments"] = [a.to_dict() for a in self.attachments]
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


@dataclass
class ThreadRequest:
    messages: list[ThreadMessage] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    tool_resources: ToolResourcesRequest | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.messages:
            data["messages"] = [m.to_dict() for m in self.messages]
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        if self.tool_resources is not None:
            data["tool_resources"] = self.tool_resources.to_dict()
        return data


@dataclass
class ModifyThreadRequest:
    metadata: dict[str, Any] | None = None
    tool_resources: ToolResources | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "metadata": None if self.metadata is None else dict(self.metadata)
        }
        if self.tool_resources is not None:
            data["tool_resources"] = self.tool_resources.to_dict()
        return data


@dataclass
class Thread:
    id: str = ""
    object: str = ""
    created_at: int = 0
    metadata: dict[str, Any] | None = None
    tool_resources: ToolResources = field(default_factory=ToolResources)
    rate_limits: RateLimitHeaders = field(default_factory=RateLimitHeaders, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Thread:
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=int(data.get("created_at") or 0),
            metadata=data.get("metadata"),
            tool_resources=ToolResources.from_dict(data.get("tool_resources")),
        )


@dataclass
class ThreadDeleteResponse:
    id: str = ""
    object: str = ""
    deleted: bool = False
    rate_limits: RateLimitHeaders = field(default_factory=RateLimitHeaders, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ThreadDeleteResponse:
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            deleted=bool(data.get("deleted", False)),
        )


class ThreadsClient:
    """Calls the threads endpoints."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def _call(self, parse: Any, method: str, path: str, body: Any = None) -> Any:
        with self.transport.request(method, path, body=body, beta=True) as response:
            result = parse(response.json() or {})
            result.rate_limits = response.rate_limits()
        return result

    def create_thread(self, request: ThreadRequest) -> Thread:
        """Create a new thread."""
        return self._call(Thread.from_dict, "POST", THREADS_PATH, request.to_dict())

    def retrieve_thread(self, thread_id: str) -> Thread:
        """Retrieve a thread."""
        return self._call(Thread.from_dict, "GET", f"{THREADS_PATH}/{thread_id}")

    def modify_thread(self, thread_id: str, request: ModifyThreadRequest) -> Thread:
        """Modify a thread."""
        return self._call(
            Thread.from_dict, "POST", f"{THREADS_PATH}/{thread_id}", request.to_dict()
        )

    def delete_thread(self, thread_id: str) -> ThreadDeleteResponse:
        """Delete a thread."""
        return self._call(ThreadDeleteResponse.from_dict, "DELETE", f"{THREADS_PATH}/{thread_id}")