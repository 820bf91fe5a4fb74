# oaiclient

A small Python client, with no dependencies beyond the standard library,
for an assistants-style HTTP API. It is a library only: it has no command
line.

## What it covers

- **Transport** (`oaiclient.transport`): `Transport` builds authenticated
  requests and sends them with `urllib`. It returns an `ApiResponse`,
  whose `content` is the body as bytes, `json()` the body decoded (or
  `None` for an empty body) and `rate_limits()` the rate-limit headers.
  A status of 400 or above raises `urllib.error.HTTPError`. `Pagination`
  holds `limit`, `order`, `after` and `before`; `query()` gives the set
  parameters as a query string in sorted key order, and `apply(path)`
  appends it to a path.
- **Threads** (`oaiclient.threads`): `ThreadsClient` creates, retrieves,
  modifies and deletes threads.
- **Runs** (`oaiclient.runs`): `RunsClient` creates, retrieves, modifies,
  lists and cancels runs, submits tool outputs, creates a thread and a run
  in one call, and retrieves and lists run steps.
- **Vector stores** (`oaiclient.vector_stores`): `VectorStoresClient`
  manages vector stores, their files and their file batches.
- **Moderation** (`oaiclient.moderation`): `ModerationClient.moderations`
  classifies text. A model other than the four current `ModerationModel`
  values (omni-latest, omni-2024-09-26, text-stable, text-latest) raises
  `ModerationInvalidModelError` before anything is sent; an empty model is
  allowed.
- **Speech** (`oaiclient.speech`): `SpeechClient.create_speech` returns
  the audio as an `ApiResponse` for the caller to read and close.
- **Streams** (`oaiclient.streaming`): `StreamReader` reads server-sent
  events line by line and hands out each `data:` payload.
- **Reasoning-model checks** (`oaiclient.reasoning`):
  `ReasoningValidator.validate` checks a request (a mapping or an object
  with the same attribute names) aimed at an `o1` or `o3` model.
- **Rate limits** (`oaiclient.ratelimit`): `RateLimitHeaders.from_headers`
  reads the `x-ratelimit-*` headers; `ResetTime.time()` turns a reset
  delay such as `"6m0s"` into a UTC `datetime`.

All thread, run and vector store calls send the `OpenAI-Beta:
assistants=<version>` header (version `v2` unless set on the `Transport`).
Response objects carry the rate limits of their response in `rate_limits`.

## Making calls

```python
from oaiclient.threads import ThreadMessage, ThreadMessageRole, ThreadRequest, ThreadsClient
from oaiclient.transport import Pagination, Transport
from oaiclient.runs import RunRequest, RunsClient

transport = Transport(api_key="placeholder")
threads = ThreadsClient(transport)

thread = threads.create_thread(
    ThreadRequest(messages=[ThreadMessage(ThreadMessageRole.USER, "Hello, World!")])
)

runs = RunsClient(transport)
run = runs.create_run(thread.id, RunRequest(assistant_id="asst_abc123"))
listing = runs.list_runs(thread.id, Pagination(limit=20, order="desc"))
```

`Transport` takes, besides the key and `base_url`
(`https://api.openai.com/v1` by default), the keyword options
`organization`, `assistant_version`, `api_version`, `opener` and `timeout`.
With `api_version` set, the key goes in an `api-key` header instead of
`Authorization: Bearer`, and URLs take the form
`<base_url>/openai[/deployments/<model>]<path>?api-version=<api_version>`.
`opener` replaces `urllib.request.urlopen`; it is called with the request
and `timeout=` and must return an object with `status`, `headers`, `read()`
and `close()`.

## Reading a stream

```python
import io
import json

from oaiclient.streaming import StreamReader

body = io.BytesIO(
    b'data: {"id": "1", "text": "hello"}\n\n'
    b'data: {"id": "2", "text": "world"}\n\n'
    b"data: [DONE]\n\n"
)

with StreamReader(body, json.loads, 300) as stream:
    for chunk in stream:
        print(chunk["text"])
```

`recv()` returns the next payload decoded, `recv_raw()` the payload bytes;
both raise `EOFError` after `data: [DONE]` or at the end of the stream, and
iteration stops there. Lines that are not `data:` lines count as empty
messages; more than the limit (300 by default) in a row raise
`TooManyEmptyStreamMessagesError`. If the server sends an error body in
place of events, `StreamError` is raised with its `message`, `error_type`,
`param` and `code`.

## Rate-limit headers

```python
from oaiclient.ratelimit import RateLimitHeaders

limits = RateLimitHeaders.from_headers({
    "x-ratelimit-limit-requests": "60",
    "x-ratelimit-remaining-requests": "59",
    "x-ratelimit-reset-requests": "1s",
})
```

Header names match without regard to case. Missing or malformed numbers
read as zero, and an unreadable reset delay counts as no delay.

## Errors

These are raised before any request is sent:

- `ModerationInvalidModelError` (a `ValueError`): unsupported moderation model.
- `ReasoningModelMaxTokensError`, `ReasoningModelLogprobsError` and
  `ReasoningModelParamsError`, all subclasses of `ReasoningModelError`
  (a `ValueError`).

Stream problems raise `StreamError` or `TooManyEmptyStreamMessagesError`;
HTTP failures raise `urllib.error.HTTPError`.

## What it does not do

The package has no client for chat or text completions, embeddings, files,
images, audio transcription or translation, assistants or thread messages.
`StreamReader` reads any event stream it is given, but nothing in the
package opens a completion stream for it. Requests are not retried.