"""Shared types for tool inputs/outputs: request, result envelope, error taxonomy."""

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel

# Schema-agnostic JSON value (null/bool/number/string/array/object).
JsonValue = Union[None, bool, int, float, str, list[Any], dict[str, Any]]


class ErrorKind(str, Enum):
    INVALID_INPUT = "InvalidInput"
    NOT_FOUND = "NotFound"
    UPSTREAM_ERROR = "UpstreamError"
    NETWORK_ERROR = "NetworkError"
    DELIVERY_FAILURE = "DeliveryFailure"
    UNKNOWN = "Unknown"


class ToolError(Exception):
    """Typed fault raised inside a tool; converted to ToolResult.error at the boundary."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class NetworkError(ToolError):
    """Timeout or connection failure. reason is 'timeout' or 'connection'."""

    def __init__(self, reason: str, detail: str = ""):
        message = f"{reason}: {detail}" if detail else reason
        super().__init__(ErrorKind.NETWORK_ERROR, message)
        self.reason = reason


@dataclass(frozen=True)
class ToolRequest:
    tool_name: str
    parameters: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResult:
    """Result envelope: exactly one of payload (success) or error kind/message."""
    payload: JsonValue = None
    error_kind: Optional[ErrorKind] = None
    message: str = ""

    @classmethod
    def ok(cls, payload: JsonValue) -> "ToolResult":
        return cls(payload=payload)

    @classmethod
    def error(cls, kind: ErrorKind, message: str) -> "ToolResult":
        return cls(error_kind=kind, message=message)

    @classmethod
    def from_exception(cls, exc: ToolError) -> "ToolResult":
        return cls.error(exc.kind, exc.message)

    @property
    def is_ok(self) -> bool:
        return self.error_kind is None

    def render(self) -> str:
        """Orchestrator-facing string: plain text as-is, JSON otherwise, {"error": ...} on failure."""
        if not self.is_ok:
            return json.dumps({"error": self.message})
        if isinstance(self.payload, str):
            return self.payload
        return json.dumps(self.payload)

    def to_dict(self) -> dict[str, Any]:
        if self.is_ok:
            return {"ok": True, "result": self.payload}
        return {"ok": False, "error": {"kind": self.error_kind.value, "message": self.message}}


@dataclass(frozen=True)
class ToolSpec:
    """Registry entry: name and description shown to the agent, argument schema, and handler."""
    name: str
    description: str
    args_schema: type[BaseModel]
    handler: Callable[..., ToolResult]


@dataclass
class SearchResult:
    """Single organic search hit, in upstream relevance order."""
    title: str
    link: str
    snippet: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class CurrencyCode:
    """ISO-style 3-letter currency code, trimmed and uppercased."""
    value: str

    @classmethod
    def parse(cls, raw: Optional[str]) -> "CurrencyCode":
        cleaned = (raw or "").strip()
        if len(cleaned) != 3:
            raise ToolError(
                ErrorKind.INVALID_INPUT,
                "Currency code must be exactly 3 characters (e.g. USD, EUR).",
            )
        return cls(cleaned.upper())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FetchResponse:
    """Raw HTTP response handed from the adapter to tools."""
    status: int
    body: str
    url: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300
