"""Route labels produced by the intent classifier."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union


class Route(str, Enum):
    """Closed set of responder routes."""

    RESEARCH = "research"
    WRITE = "write"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ClarifyingQuestion:
    """Classifier output that is not a known label; echoed back to the user."""

    text: str


RouteLabel = Union[Route, ClarifyingQuestion]

# "writer" is what the orchestrator prompt historically returned
_LABEL_ALIASES: dict[str, Route] = {
    "research": Route.RESEARCH,
    "write": Route.WRITE,
    "writer": Route.WRITE,
    "assistant": Route.ASSISTANT,
}

_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")


def normalize_route_text(raw: str) -> str:
    """Strip whitespace and one leading/trailing quote character."""
    return _SURROUNDING_QUOTES.sub("", (raw or "").strip()).strip()


def parse_route_label(raw: str) -> RouteLabel:
    """Map raw classifier output onto a RouteLabel.

    Known labels are matched case-insensitively after normalization; anything
    else becomes a ClarifyingQuestion carrying the normalized text.
    """
    text = normalize_route_text(raw)
    route = _LABEL_ALIASES.get(text.casefold())
    if route is not None:
        return route
    return ClarifyingQuestion(text=text)


def route_name(label: RouteLabel) -> str:
    """Wire/log representation of a label."""
    if isinstance(label, Route):
        return label.value
    return label.text
