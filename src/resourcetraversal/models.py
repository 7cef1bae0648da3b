from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from resourcetraversal.extractors.services import Service


@dataclass(slots=True)
class ExtractionResult:
    url: str
    title: str
    content: str
    service: Service | None = None


@dataclass(slots=True)
class ToolResult:
    text: str
    is_error: bool = False


@dataclass(slots=True)
class ToolSpec:
    name: str
    description: str
    input_schema: dict[str, Any] = field(default_factory=dict)
