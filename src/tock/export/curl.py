"""Replay line — an ``api.response`` request rebuilt as one ``curl`` command.

``request_to_curl`` is a pure function of the request's method, url, params,
headers and body.  Headers keep the mapping's insertion order, every
argument is shell-quoted, and the result never spans more than one line.
"""

from __future__ import annotations

import json
import shlex
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode


def request_to_curl(request: Mapping[str, Any] | None) -> str:
    """Build ``curl -X METHOD -H '...' --data '...' URL`` for ``request``."""
    request = request if isinstance(request, Mapping) else {}
    method = str(request.get("method") or "GET").upper()
    url = with_params(str(request.get("url") or ""), request.get("params"))

    args = ["curl", "-X", method]
    headers = request.get("headers")
    if isinstance(headers, Mapping):
        for key, value in headers.items():
            args += ["-H", f"{key}: {value}"]

    body = request.get("data")
    if body is not None and body != "":
        args += ["--data", encode_body(body)]

    args.append(url)
    return " ".join(shlex.quote(_single_line(arg)) for arg in args)


def with_params(url: str, params: Any) -> str:
    """Append query ``params`` to ``url`` in their mapping order."""
    if not isinstance(params, Mapping) or not params:
        return url
    query = urlencode([(str(k), v) for k, v in params.items()], doseq=True)
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def encode_body(body: Any) -> str:
    """Compact, single-line body text for ``--data``.

    JSON text is re-encoded compactly; other strings pass through; structured
    bodies are JSON-encoded with keys in insertion order.
    """
    if isinstance(body, str):
        try:
            parsed = json.loads(body)
        except ValueError:
            return body
        if not isinstance(parsed, dict | list):
            return body
        body = parsed
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False, default=str)


def _single_line(text: str) -> str:
    return text.replace("\r", "\\r").replace("\n", "\\n")
