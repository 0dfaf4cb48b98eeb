"""Tool data structures.

These dataclasses describe tool calling both ways:
- exposing the available tools to the LLM (ToolDef / ToolParam);
- carrying the calls the model makes and their results (ToolCall / ToolResult).
"""

from dataclasses import dataclass
from typing import Dict, Any

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class ToolParam:
    """Definition of one tool parameter."""

    name: str
    description: str
    required: bool
    schema: Dict[str, Any]


@dataclass
class ToolDef:
    """A tool the LLM may call."""

    name: str
    description: str
    params: Dict[str, ToolParam]


@dataclass
class ToolCall:
    """A tool invocation requested by the model.

    ``arguments`` is the raw text the provider returned. It is meant to be
    JSON but is parsed (and validated) only by the ToolExecutor.
    """

    id: str
    name: str
    arguments: str


@dataclass
class ToolResult:
    """Text result of one tool call."""

    call_id: str
    name: str
    content: str


class WebSearchArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")

    query: str = Field(..., min_length=1, description="Search query")
