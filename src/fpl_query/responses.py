"""Tool results and the JSON envelopes they are rendered into."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from mcp.types import TextContent
from pydantic import BaseModel

if TYPE_CHECKING:
    from fpl_query.errors import ErrorCode


@dataclass(frozen=True)
class Success:
    data: Any

    def to_envelope(self) -> dict[str, Any]:
        return {"success": True, "data": _plain(self.data)}


@dataclass(frozen=True)
class Failure:
    code: ErrorCode
    message: str
    details: Any = None

    def to_envelope(self) -> dict[str, Any]:
        envelope: dict[str, Any] = {"error": True, "message": self.message, "code": self.code.value}
        if self.details is not None:
            envelope["details"] = _plain(self.details)
        return envelope


Result = Union[Success, Failure]


def _plain(value: Any) -> Any:
    """Dump view models (camelCase keys) so the envelope is plain JSON data."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


def render(result: Result) -> list[TextContent]:
    payload = result.to_envelope()
    return [TextContent(type="text", text=json.dumps(payload, ensure_ascii=False, default=str))]
