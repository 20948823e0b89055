"""API-call report — a plain-text transcript of every ``api.response``.

One block per call, in store order::

    API Call #1
    Timestamp: 2024-05-01T10:00:00.000Z
    Method: GET
    URL: http://x/y
    Status: 200
    Duration: 12ms
    Request Headers:
      accept: application/json
    Request Body:
    {...}
    Response Headers:
      content-type: application/json
    Response Body:
    {...}
    cURL Command:
    curl -X GET -H 'accept: application/json' http://x/y
    ------

Bodies that are JSON text are pretty-printed; anything that fails to decode
is written as-is.  A body is never dropped.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from tock.commands.registry import payload_get
from tock.export.curl import request_to_curl

if TYPE_CHECKING:
    from tock.timeline.command import Command

API_RESPONSE = "api.response"
BLOCK_DELIMITER = "------"


def select_api_calls(commands: Iterable[Command]) -> tuple[Command, ...]:
    """The ``api.response`` commands, in store order."""
    return tuple(c for c in commands if c.type == API_RESPONSE)


def pretty_body(body: Any) -> str:
    """Pretty-print a body: decode JSON text, else return the text verbatim."""
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except ValueError:
            return body
    return json.dumps(body, indent=2, ensure_ascii=False, default=str)


def render_api_call(index: int, command: Command) -> str:
    """Render one report block (1-based ``index``), delimiter included."""
    payload = command.payload
    request = payload_get(payload, "request")
    response = payload_get(payload, "response")

    lines = [
        f"API Call #{index}",
        f"Timestamp: {command.timestamp}",
        f"Method: {_text(payload_get(payload, 'request', 'method'))}",
        f"URL: {_text(payload_get(payload, 'request', 'url'))}",
        f"Status: {_text(payload_get(payload, 'response', 'status'))}",
        f"Duration: {_text(payload_get(payload, 'duration'))}ms",
    ]

    request_headers = payload_get(payload, "request", "headers")
    if request_headers is not None:
        lines.append("Request Headers:")
        lines.extend(_header_lines(request_headers))

    request_body = payload_get(payload, "request", "data")
    if request_body is not None and request_body != "":
        lines.append("Request Body:")
        lines.append(pretty_body(request_body))

    lines.append("Response Headers:")
    lines.extend(_header_lines(payload_get(payload, "response", "headers")))

    lines.append("Response Body:")
    lines.append(pretty_body(response.get("body") if isinstance(response, dict) else None))

    lines.append("cURL Command:")
    lines.append(request_to_curl(request if isinstance(request, Mapping) else None))
    lines.append(BLOCK_DELIMITER)
    return "\n".join(lines) + "\n\n"


def render_api_report(commands: Iterable[Command]) -> str | None:
    """Render the report for every API call, or ``None`` if there are none."""
    calls = select_api_calls(commands)
    if not calls:
        return None
    return "".join(render_api_call(i, command) for i, command in enumerate(calls, start=1))


def _header_lines(headers: Any) -> list[str]:
    if not isinstance(headers, Mapping):
        return []
    return [f"  {key}: {value}" for key, value in headers.items()]


def _text(value: Any) -> str:
    return "-" if value is None else str(value)
