"""Vector stores, their files and file batches: data types and the client."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .ratelimit import RateLimitHeaders
from .transport import Pagination, Transport

VECTOR_STORES_PATH = "/vector_stores"
FILES_PATH = "/files"
FILE_BATCHES_PATH = "/file_batches"


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


@dataclass
class VectorStoreFileCount:
    in_progress: int = 0
    completed: int = 0
    failed: int = 0
    cancelled: int = 0
    total: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> VectorStoreFileCount:
        data = data or {}
        return cls(
            in_progress=int(data.get("in_progress") or 0),
            completed=int(data.get("completed") or 0),
            failed=int(data.get("failed") or 0),
            cancelled=int(data.get("cancelled") or 0),
            total=int(data.get("total") or 0),
        )


@dataclass
class VectorStoreExpires:
    """When a vector store expires: ``days`` after the ``anchor`` event."""

    anchor: str = ""
    days: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"anchor": self.anchor, "days": self.days}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VectorStoreExpires:
        return cls(anchor=data.get("anchor") or "", days=int(data.get("days") or 0))


@dataclass
class VectorStore:
    id: str = ""
    object: str = ""
    created_at: int = 0
    name: str = ""
    usage_bytes: int = 0
    file_counts: VectorStoreFileCount = field(default_factory=VectorStoreFileCount)
    status: str = ""
    expires_after: VectorStoreExpires | None = None
    expires_at: int | None = None
    metadata: dict[str, Any] | None = None
    rate_limits: RateLimitHeaders = field(default_factory=RateLimitHeaders, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VectorStore:
        expires_after = data.get("expires_after")
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=int(data.get("created_at") or 0),
            name=data.get("name") or "",
            usage_bytes=int(data.get("usage_bytes") or 0),
            file_counts=VectorStoreFileCount.from_dict(data.get("file_counts")),
            status=data.get("status") or "",
            expires_after=None
            if expires_after is None
            else VectorStoreExpires.from_dict(expires_after),
            expires_at=_optional_int(data.get("expires_at")),
            metadata=data.get("metadata"),
        )


@dataclass
class VectorStoreRequest:
    """Parameters for creating or modifying a vector store."""

    name: str = ""
    file_ids: list[str] = field(default_factory=list)
    expires_after: VectorStoreExpires | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.name:
            data["name"] = self.name
        if self.file_ids:
            data["file_ids"] = list(self.file_ids)
        if self.expires_after is not None:
            data["expires_after"] = self.expires_after.to_dict()
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


@dataclass
class VectorStoresList:
    vector_stores: list[VectorStore] = field(default_factory=list)
    last_id: str | None = None
    first_id: str | None = None
    has_more: bool = False
    rate_limits: RateLimitHeaders = field(default_factory=RateLimitHeaders, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VectorStoresList:
        return cls(
            vector_stores=[VectorStore.from_dict(item) for item in data.get("data") or []],
            last_id=_optional_str(data.get("last_id")),
            first_id=_optional_str(data.get("first_id")),
            has_more=bool(data.get("has_more", False)),
        )


@dataclass
class VectorStoreDeleteResponse:
    id: str = ""
    object: str = ""
    deleted: bool = False
    rate_limits: RateLimitHeaders = field(default_factory=RateLimitHeaders, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VectorStoreDeleteResponse:
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            deleted=bool(data.get("deleted", False)),
        )


@dataclass
class VectorStoreFile:
    id: str = ""
    object: str = ""
    created_at: int = 0
    vector_store_id: str = ""
    usage_bytes: int = 0
    status: str = ""
    rate_limits: RateLimitHeaders = field(default_factory=RateLimitHeaders, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VectorStoreFile:
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=int(data.get("created_at") or 0),
            vector_store_id=data.get("vector_store_id") or "",
            usage_bytes=int(data.get("usage_bytes") or 0),
            status=data.get("status") or "",
        )


@dataclass
class VectorStoreFileRequest:
    file_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"file_id": self.file_id}


@dataclass
class VectorStoreFilesList:
    vector_store_files: list[VectorStoreFile] = field(default_factory=list)
    first_id: str | None = None
    last_id: str | None = None
    has_more: bool = False
    rate_limits: RateLimitHeaders = field(default_factory=RateLimitHeaders, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VectorStoreFilesList:
        return cls(
            vector_store_files=[
                VectorStoreFile.from_dict(item) for item in data.get("data") or []
            ],
            first_id=_optional_str(data.get("first_id")),
            last_id=_optional_str(data.get("last_id")),
            has_more=bool(data.get("has_more", False)),
        )


@dataclass
class VectorStoreFileBatch:
    id: str = ""
    object: str = ""
    created_at: int = 0
    vector_store_id: str = ""
    status: str = ""
    file_counts: VectorStoreFileCount = field(default_factory=VectorStoreFileCount)
    rate_limits: RateLimitHeaders = field(default_factory=RateLimitHeaders, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VectorStoreFileBatch:
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=int(data.get("created_at") or 0),
            vector_store_id=data.get("vector_store_id") or "",
            status=data.get("status") or "",
            file_counts=VectorStoreFileCount.from_dict(data.get("file_counts")),
        )


@dataclass
class VectorStoreFileBatchRequest:
    file_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"file_ids": list(self.file_ids)}


class VectorStoresClient:
    """Calls the vector store, vector store file and file batch endpoints."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def _call(self, parse: Any, method: str, path: str, body: Any = None) -> Any:
        with self.transport.request(method, path, body=body, beta=True) as response:
            result = parse(response.json() or {})
            result.rate_limits = response.rate_limits()
        return result

    @staticmethod
    def _store(vector_store_id: str) -> str:
        return f"{VECTOR_STORES_PATH}/{vector_store_id}"

    def create_vector_store(self, request: VectorStoreRequest) -> VectorStore:
        """Create a new vector store."""
        return self._call(VectorStore.from_dict, "POST", VECTOR_STORES_PATH, request.to_dict())

    def retrieve_vector_store(self, vector_store_id: str) -> VectorStore:
        """Retrieve a vector store."""
        return self._call(VectorStore.from_dict, "GET", self._store(vector_store_id))

    def modify_vector_store(
        self, vector_store_id: str, request: VectorStoreRequest
    ) -> VectorStore:
        """Modify a vector store."""
        return self._call(
            VectorStore.from_dict, "POST", self._store(vector_store_id), request.to_dict()
        )

    def delete_vector_store(self, vector_store_id: str) -> VectorStoreDeleteResponse:
        """Delete a vector store."""
        return self._call(
            VectorStoreDeleteResponse.from_dict, "DELETE", self._store(vector_store_id)
        )

    def list_vector_stores(self, pagination: Pagination) -> VectorStoresList:
        """List the vector stores."""
        return self._call(
            VectorStoresList.from_dict, "GET", pagination.apply(VECTOR_STORES_PATH)
        )

    def create_vector_store_file(
        self, vector_store_id: str, request: VectorStoreFileRequest
    ) -> VectorStoreFile:
        """Attach a file to a vector store."""
        path = self._store(vector_store_id) + FILES_PATH
        return self._call(VectorStoreFile.from_dict, "POST", path, request.to_dict())

    def retrieve_vector_store_file(self, vector_store_id: str, file_id: str) -> VectorStoreFile:
        """Retrieve a file of a vector store."""
        path = f"{self._store(vector_store_id)}{FILES_PATH}/{file_id}"
        return self._call(VectorStoreFile.from_dict, "GET", path)

    def delete_vector_store_file(self, vector_store_id: str, file_id: str) -> None:
        """Remove a file from a vector store; the response body is not read."""
        path = f"{self._store(vector_store_id)}{FILES_PATH}/{file_id}"
        with self.transport.request("DELETE", path, beta=True):
            pass

    def list_vector_store_files(
        self, vector_store_id: str, pagination: Pagination
    ) -> VectorStoreFilesList:
        """List the files of a vector store."""
        path = pagination.apply(self._store(vector_store_id) + FILES_PATH)
        return self._call(VectorStoreFilesList.from_dict, "GET", path)

    def create_vector_store_file_batch(
        self, vector_store_id: str, request: VectorStoreFileBatchRequest
    ) -> VectorStoreFileBatch:
        """Attach several files to a vector store at once."""
        path = self._store(vector_store_id) + FILE_BATCHES_PATH
        return self._call(VectorStoreFileBatch.from_dict, "POST", path, request.to_dict())

    def retrieve_vector_store_file_batch(
        self, vector_store_id: str, batch_id: str
    ) -> VectorStoreFileBatch:
        """Retrieve a file batch."""
        path = f"{self._store(vector_store_id)}{FILE_BATCHES_PATH}/{batch_id}"
        return self._call(VectorStoreFileBatch.from_dict, "GET", path)

    def cancel_vector_store_file_batch(
        self, vector_store_id: str, batch_id: str
    ) -> VectorStoreFileBatch:
        """Cancel a file batch."""
        path = f"{self._store(vector_store_id)}{FILE_BATCHES_PATH}/{batch_id}/cancel"
        return self._call(VectorStoreFileBatch.from_dict, "POST", path)

    def list_vector_store_files_in_batch(
        self, vector_store_id: str, batch_id: str, pagination: Pagination
    ) -> VectorStoreFilesList:
        """List the files of a file batch."""
        path = pagination.apply(
            f"{self._store(vector_store_id)}{FILE_BATCHES_PATH}/{batch_id}/files"
        )
        return self._call(VectorStoreFilesList.from_dict, "GET", path)