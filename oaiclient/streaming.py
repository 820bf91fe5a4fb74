"""Reader for server-sent event streams of API responses."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from typing import Any, BinaryIO

DEFAULT_EMPTY_MESSAGES_LIMIT = 300

_DATA_PREFIX = b"data: "
_ERROR_PREFIX = b'data: {"error":'
_DONE = b"[DONE]"


class TooManyEmptyStreamMessagesError(Exception):
    """The stream sent more lines without data than allowed."""

    def __init__(self) -> None:
        super().__init__("stream has sent too many empty messages")


class StreamError(Exception):
    """An error object that the server sent in place of stream events."""

    def __init__(
        self,
        message: str = "",
        *,
        error_type: str | None = None,
        param: Any = None,
        code: Any = None,
    ) -> None:
        super().__init__(f"error, {message}")
        self.message = message
        self.error_type = error_type
        self.param = param
        self.code = code


class StreamReader:
    """Reads ``data:`` events from a byte stream until ``[DONE]``.

    ``recv`` and ``recv_raw`` raise ``EOFError`` once the stream is over.
    """

    def __init__(
        self,
        stream: BinaryIO,
        decode: Callable[[bytes], Any] = json.loads,
        empty_messages_limit: int = DEFAULT_EMPTY_MESSAGES_LIMIT,
    ) -> None:
        self._stream = stream
        self._decode = decode
        self._empty_messages_limit = empty_messages_limit
        self._errors = bytearray()
        self._finished = False

    def recv(self) -> Any:
        """Return the next event, decoded."""
        return self._decode(self.recv_raw())

    def recv_raw(self) -> bytes:
        """Return the payload of the next event as bytes."""
        if self._finished:
            raise EOFError("stream finished")
        return self._next_payload()

    def _next_payload(self) -> bytes:
        empty_messages = 0
        has_error_prefix = False
        while True:
            line = self._stream.readline()
            if not line.endswith(b"\n") or has_error_prefix:
                error = self._stream_error()
                if error is not None:
                    raise error
                raise EOFError("stream ended")

            stripped = line.strip()
            if stripped.startswith(_ERROR_PREFIX):
                has_error_prefix = True
            if has_error_prefix or not stripped.startswith(_DATA_PREFIX):
                if has_error_prefix:
                    stripped = stripped.removeprefix(_DATA_PREFIX)
                self._errors += stripped
                empty_messages += 1
                if empty_messages > self._empty_messages_limit:
                    raise TooManyEmptyStreamMessagesError()
                continue

            payload = stripped.removeprefix(_DATA_PREFIX)
            if payload == _DONE:
                self._finished = True
                raise EOFError("stream finished")
            return payload

    def _stream_error(self) -> StreamError | None:
        if not self._errors:
            return None
        try:
            parsed = json.loads(bytes(self._errors))
        except ValueError:
            return None
        if not isinstance(parsed, dict):
            return None
        detail = parsed.get("error")
        if not isinstance(detail, dict):
            detail = {}
        message = detail.get("message")
        return StreamError(
            "" if message is None else str(message),
            error_type=detail.get("type"),
            param=detail.get("param"),
            code=detail.get("code"),
        )

    def close(self) -> None:
        self._stream.close()

    def __iter__(self) -> Iterator[Any]:
        while True:
            try:
                item = self.recv()
            except EOFError:
                return
            yield item

    def __enter__(self) -> StreamReader:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()