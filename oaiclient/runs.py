"""Assistant runs and run steps: data types and the client for the runs endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from .ratelimit import RateLimitHeaders
from .threads import ThreadMessage, ThreadRequest
from .transport import Pagination, Transport

_E = TypeVar("_E", bound=Enum)


def _text(value: Any) -> str:
    return str(value.value) if isinstance(value, Enum) else str(value)


def _plain(value: Any) -> Any:
    """Turn request values into JSON-ready data."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def _enum(kind: type[_E], value: Any) -> _E | str:
    """The enum member for ``value``, or the plain string if it is unknown."""
    text = value or ""
    try:
        return kind(text)
    except ValueError:
        return text


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)


class RunStatus(str, Enum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    FAILED = "failed"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class RequiredActionType(str, Enum):
    SUBMIT_TOOL_OUTPUTS = "submit_tool_outputs"


class RunError(str, Enum):
    SERVER_ERROR = "server_error"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"


class TruncationStrategy(str, Enum):
    """How a thread is cut down to fit the model's context."""

    AUTO = "auto"
    LAST_MESSAGES = "last_messages"


class RunStepStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    CANCELLING = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    EXPIRED = "expired"


class RunStepType(str, Enum):
    MESSAGE_CREATION = "message_creation"
    TOOL_CALLS = "tool_calls"


@dataclass
class ThreadTruncationStrategy:
    """Truncation strategy; ``last_messages`` applies to ``LAST_MESSAGES`` only."""

    type: TruncationStrategy | str = ""
    last_messages: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        kind = _text(self.type)
        if kind:
            data["type"] = kind
        if self.last_messages is not None:
            data["last_messages"] = self.last_messages
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ThreadTruncationStrategy:
        return cls(
            type=_enum(TruncationStrategy, data.get("type")),
            last_messages=_optional_int(data.get("last_messages")),
        )


@dataclass
class RunLastError:
    code: RunError | str = ""
    message: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RunLastError:
        return cls(code=_enum(RunError, data.get("code")), message=data.get("message") or "")


@dataclass
class RunRequiredAction:
    """An action the run waits for; tool calls are kept as sent by the server."""

    type: RequiredActionType | str = ""
    submit_tool_outputs: list[dict[str, Any]] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RunRequiredAction:
        outputs = data.get("submit_tool_outputs")
        return cls(
            type=_enum(RequiredActionType, data.get("type")),
            submit_tool_outputs=None
            if outputs is None
            else list(outputs.get("tool_calls") or []),
        )


@dataclass
class RunRequest:
    assistant_id: str
    model: str = ""
    instructions: str = ""
    additional_instructions: str = ""
    additional_messages: list[ThreadMessage] = field(default_factory=list)
    tools: list[Any] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    temperature: float | None = None
    top_p: float | None = None
    max_prompt_tokens: int = 0
    max_completion_tokens: int = 0
    truncation_strategy: ThreadTruncationStrategy | None = None
    tool_choice: Any = None
    response_format: Any = None
    parallel_tool_calls: Any = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"assistant_id": self.assistant_id}
        for key in ("model", "instructions", "additional_instructions"):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.additional_messages:
            data["additional_messages"] = [m.to_dict() for m in self.additional_messages]
        if self.tools:
            data["tools"] = _plain(self.tools)
        if self.metadata:
            data["metadata"] = _plain(self.metadata)
        for key in ("temperature", "top_p"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        for key in ("max_prompt_tokens", "max_completion_tokens"):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.truncation_strategy is not None:
            data["truncation_strategy"] = self.truncation_strategy.to_dict()
        for key in ("tool_choice", "response_format", "parallel_tool_calls"):
            value = getattr(self, key)
            if value is not None:
                data[key] = _plain(value)
        return data


@dataclass
class RunModifyRequest:
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"metadata": _plain(self.metadata)} if self.metadata else {}


@dataclass
class ToolOutput:
    tool_call_id: str
    output: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"tool_call_id": self.tool_call_id, "output": _plain(self.output)}


@dataclass
class SubmitToolOutputsRequest:
    tool_outputs: list[ToolOutput] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"tool_outputs": [output.to_dict() for output in self.tool_outputs]}


@dataclass
class CreateThreadAndRunRequest(RunRequest):
    """A run request together with the thread to create for it."""

    thread: ThreadRequest = field(default_factory=ThreadRequest)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["thread"] = self.thread.to_dict()
        return data


@dataclass
class Run:
    id: str = ""
    object: str = ""
    created_at: int = 0
    thread_id: str = ""
    assistant_id: str = ""
    status: RunStatus | str = ""
    required_action: RunRequiredAction | None = None
    last_error: RunLastError | None = None
    expires_at: int = 0
    started_at: int | None = None
    cancelled_at: int | None = None
    failed_at: int | None = None
    completed_at: int | None = None
    model: str = ""
    instructions: str = ""
    tools: list[dict[str, Any]] = field(default_factory=list)
    file_ids: list[str] = field(default_factory=list)
    metadata: dict[str, Any] | None = None
    usage: dict[str, Any] = field(default_factory=dict)
    temperature: float | None = None
    max_prompt_tokens: int = 0
    max_completion_tokens: int = 0
    truncation_strategy: ThreadTruncationStrategy | None = None
    rate_limits: RateLimitHeaders = field(default_factory=RateLimitHeaders, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Run:
        action = data.get("required_action")
        error = data.get("last_error")
        truncation = data.get("truncation_strategy")
        temperature = data.get("temperature")
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=int(data.get("created_at") or 0),
            thread_id=data.get("thread_id") or "",
            assistant_id=data.get("assistant_id") or "",
            status=_enum(RunStatus, data.get("status")),
            required_action=None if action is None else RunRequiredAction.from_dict(action),
            last_error=None if error is None else RunLastError.from_dict(error),
            expires_at=int(data.get("expires_at") or 0),
            started_at=_optional_int(data.get("started_at")),
            cancelled_at=_optional_int(data.get("cancelled_at")),
            failed_at=_optional_int(data.get("failed_at")),
            completed_at=_optional_int(data.get("completed_at")),
            model=data.get("model") or "",
            instructions=data.get("instructions") or "",
            tools=list(data.get("tools") or []),
            file_ids=list(data.get("file_ids") or []),
            metadata=data.get("metadata"),
            usage=dict(data.get("usage") or {}),
            temperature=None if temperature is None else float(temperature),
            max_prompt_tokens=int(data.get("max_prompt_tokens") or 0),
            max_completion_tokens=int(data.get("max_completion_tokens") or 0),
            truncation_strategy=None
            if truncation is None
            else ThreadTruncationStrategy.from_dict(truncation),
        )


@dataclass
class RunList:
    runs: list[Run] = field(default_factory=list)
    rate_limits: RateLimitHeaders = field(default_factory=RateLimitHeaders, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RunList:
        return cls(runs=[Run.from_dict(item) for item in data.get("data") or []])


@dataclass
class StepDetails:
    """What a step did: the message it created or the tool calls it made."""

    type: RunStepType | str = ""
    message_id: str | None = None
    tool_calls: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> StepDetails:
        data = data or {}
        creation = data.get("message_creation")
        return cls(
            type=_enum(RunStepType, data.get("type")),
            message_id=None if creation is None else creation.get("message_id") or "",
            tool_calls=list(data.get("tool_calls") or []),
        )


@dataclass
class RunStep:
    id: str = ""
    object: str = ""
    created_at: int = 0
    assistant_id: str = ""
    thread_id: str = ""
    run_id: str = ""
    type: RunStepType | str = ""
    status: RunStepStatus | str = ""
    step_details: StepDetails = field(default_factory=StepDetails)
    last_error: RunLastError | None = None
    expired_at: int | None = None
    cancelled_at: int | None = None
    failed_at: int | None = None
    completed_at: int | None = None
    metadata: dict[str, Any] | None = None
    rate_limits: RateLimitHeaders = field(default_factory=RateLimitHeaders, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RunStep:
        error = data.get("last_error")
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=int(data.get("created_at") or 0),
            assistant_id=data.get("assistant_id") or "",
            thread_id=data.get("thread_id") or "",
            run_id=data.get("run_id") or "",
            type=_enum(RunStepType, data.get("type")),
            status=_enum(RunStepStatus, data.get("status")),
            step_details=StepDetails.from_dict(data.get("step_details")),
            last_error=None if error is None else RunLastError.from_dict(error),
            expired_at=_optional_int(data.get("expired_at")),
            cancelled_at=_optional_int(data.get("cancelled_at")),
            failed_at=_optional_int(data.get("failed_at")),
            completed_at=_optional_int(data.get("completed_at")),
            metadata=data.get("metadata"),
        )


@dataclass
class RunStepList:
    run_steps: list[RunStep] = field(default_factory=list)
    first_id: str = ""
    last_id: str = ""
    has_more: bool = False
    rate_limits: RateLimitHeaders = field(default_factory=RateLimitHeaders, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RunStepList:
        return cls(
            run_steps=[RunStep.from_dict(item) for item in data.get("data") or []],
            first_id=data.get("first_id") or "",
            last_id=data.get("last_id") or "",
            has_more=bool(data.get("has_more", False)),
        )


class RunsClient:
    """Calls the runs and run steps endpoints."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def _call(self, parse: Any, method: str, path: str, body: Any = None) -> Any:
        with self.transport.request(method, path, body=body, beta=True) as response:
            result = parse(response.json() or {})
            result.rate_limits = response.rate_limits()
        return result

    def create_run(self, thread_id: str, request: RunRequest) -> Run:
        """Create a run on a thread."""
        return self._call(Run.from_dict, "POST", f"/threads/{thread_id}/runs", request.to_dict())

    def retrieve_run(self, thread_id: str, run_id: str) -> Run:
        """Retrieve a run."""
        return self._call(Run.from_dict, "GET", f"/threads/{thread_id}/runs/{run_id}")

    def modify_run(self, thread_id: str, run_id: str, request: RunModifyRequest) -> Run:
        """Modify a run."""
        return self._call(
            Run.from_dict, "POST", f"/threads/{thread_id}/runs/{run_id}", request.to_dict()
        )

    def list_runs(self, thread_id: str, pagination: Pagination) -> RunList:
        """List the runs of a thread."""
        path = pagination.apply(f"/threads/{thread_id}/runs")
        return self._call(RunList.from_dict, "GET", path)

    def submit_tool_outputs(
        self, thread_id: str, run_id: str, request: SubmitToolOutputsRequest
    ) -> Run:
        """Submit the outputs of the tool calls a run asked for."""
        return self._call(
            Run.from_dict,
            "POST",
            f"/threads/{thread_id}/runs/{run_id}/submit_tool_outputs",
            request.to_dict(),
        )

    def cancel_run(self, thread_id: str, run_id: str) -> Run:
        """Cancel a run."""
        return self._call(Run.from_dict, "POST", f"/threads/{thread_id}/runs/{run_id}/cancel")

    def create_thread_and_run(self, request: CreateThreadAndRunRequest) -> Run:
        """Create a thread and start a run on it."""
        return self._call(Run.from_dict, "POST", "/threads/runs", request.to_dict())

    def retrieve_run_step(self, thread_id: str, run_id: str, step_id: str) -> RunStep:
        """Retrieve one step of a run."""
        return self._call(
            RunStep.from_dict, "GET", f"/threads/{thread_id}/runs/{run_id}/steps/{step_id}"
        )

    def list_run_steps(self, thread_id: str, run_id: str, pagination: Pagination) -> RunStepList:
        """List the steps of a run."""
        path = pagination.apply(f"/threads/{thread_id}/runs/{run_id}/steps")
        return self._call(RunStepList.from_dict, "GET", path)