"""Envelope codec for the JSON messages carried in websocket text frames.

Request layout::

    {"command": "<kind>", ...command specific fields...}

Reply layout::

    {"status": "ok",    "responseData": {...}, "attributes": {...}}
    {"status": "error", "exception": {"text": "...", "sqlCode": "..."}}

Field names are fixed by the server and use camelCase.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

STATUS_OK = "ok"
STATUS_ERROR = "error"


@dataclass
class Frame:
    """A decoded reply envelope."""

    status: str
    response_data: dict[str, Any] = field(default_factory=dict)
    exception: dict[str, Any] | None = None
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    @property
    def error_text(self) -> str:
        if not self.exception:
            return f"server returned status {self.status!r}"
        return str(self.exception.get("text", "unknown server error"))

    @property
    def sql_code(self) -> str | None:
        if not self.exception:
            return None
        return self.exception.get("sqlCode")

    def __repr__(self) -> str:
        keys = ", ".join(sorted(self.response_data)) or "(empty)"
        return f"Frame(status={self.status!r}, response_data=[{keys}])"


def build_frame(message: dict[str, Any]) -> str:
    """Serialize one command envelope into the text of a single frame."""
    return json.dumps(message, separators=(",", ":"), default=str)


def parse_frame(data: str | bytes) -> Frame | None:
    """Decode one reply frame.

    Returns:
        A ``Frame``, or ``None`` if the text is not a JSON object carrying
        a ``status`` field.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError:
            return None

    try:
        message = json.loads(data)
    except ValueError:
        return None

    if not isinstance(message, dict):
        return None

    status = message.get("status")
    if not isinstance(status, str):
        return None

    response_data = message.get("responseData") or {}
    attributes = message.get("attributes") or {}
    exception = message.get("exception")
    if not isinstance(response_data, dict) or not isinstance(attributes, dict):
        return None

    return Frame(
        status=status,
        response_data=response_data,
        exception=exception if isinstance(exception, dict) else None,
        attributes=attributes,
    )
