"""Find interaction blocks in running text and splice them out as nodes.

Host document pipelines walk their own trees; for each text node they call
``split_interactions`` and replace the node with the returned pieces: plain
strings for the untouched text and ``InteractionNode`` for each block.
"""

import logging
from typing import Any, Dict, List, Union

from decouple import config as env_config
from pydantic import BaseModel, ConfigDict

from .models import DisplayProperties
from .parsing import INTERACTION_PATTERN, InteractionParser

logger = logging.getLogger(__name__)

ELEMENT_NAME = env_config("REMARKFLOW_ELEMENT_NAME", default="custom-variable", cast=str)


class InteractionNode(BaseModel):
    """An interaction block found in text, with its display properties."""

    model_config = ConfigDict(frozen=True)

    name: str = ELEMENT_NAME
    source: str
    start: int
    end: int
    properties: DisplayProperties

    def as_element(self) -> Dict[str, Any]:
        """Return the node in the element shape used by markdown ASTs."""
        return {
            "type": "element",
            "data": {"hName": self.name, "hProperties": self.properties.as_properties()},
        }


def should_skip(inner: str) -> bool:
    """True for block content with a broken variable marker.

    ``%{name}`` (single braces) and ``%{{}}`` (empty name) are left as plain
    text rather than rendered as buttons.
    """
    if "%{" not in inner:
        return False
    return "%{{" not in inner or "%{{}}" in inner


def split_interactions(
    text: str, parser: InteractionParser = None, name: str = None
) -> List[Union[str, InteractionNode]]:
    """Split text into plain strings and interaction nodes.

    The result alternates text and nodes, and always starts and ends with a
    (possibly empty) string, so a single block gives
    ``[before, node, after]``. Skipped blocks stay inside the text.

    Args:
        text: Text to scan
        parser: Parser to use (a new one by default)
        name: Element name for the nodes (defaults to ELEMENT_NAME)
    """
    parser = parser or InteractionParser()
    name = name or ELEMENT_NAME

    pieces: List[Union[str, InteractionNode]] = []
    last_end = 0
    for match in INTERACTION_PATTERN.finditer(text):
        if should_skip(match.group(1)):
            logger.debug(f"Leaving malformed variable block as text: {match.group(0)!r}")
            continue
        pieces.append(text[last_end : match.start()])
        pieces.append(
            InteractionNode(
                name=name,
                source=match.group(0),
                start=match.start(),
                end=match.end(),
                properties=parser.parse_for_display(match.group(0)),
            )
        )
        last_end = match.end()
    pieces.append(text[last_end:])
    return pieces


def find_interactions(
    text: str, parser: InteractionParser = None, name: str = None
) -> List[InteractionNode]:
    """Return every interaction block in ``text``, in order."""
    return [
        piece
        for piece in split_interactions(text, parser=parser, name=name)
        if isinstance(piece, InteractionNode)
    ]
