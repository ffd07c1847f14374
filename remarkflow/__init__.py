"""remarkflow -- interaction blocks for markdown flow documents.

Example:
    >>> from remarkflow import parse_for_display
    >>> parse_for_display("?[Save//save | Cancel//cancel]").as_properties()
    {'buttonTexts': ['Save', 'Cancel'], 'buttonValues': ['save', 'cancel']}
"""

import logging

# Version - reads from package metadata (set in pyproject.toml)
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("remarkflow")
except PackageNotFoundError:
    __version__ = "0.0.0+dev"

logger = logging.getLogger(__name__)

from .errors import MalformedInteractionError
from .markup import (ELEMENT_NAME, InteractionNode, find_interactions,
                     should_skip, split_interactions)
from .models import (Button, ButtonsOnly, ButtonsWithText, DisplayProperties,
                     ErrorResult, InteractionType, NonAssignmentButtons,
                     ParseResult, TextOnly)
from .parsing import (InteractionParser, create_interaction_parser,
                      parse_interaction_format)

_default_parser = InteractionParser()


def parse(content: str) -> ParseResult:
    """Parse one ``?[...]`` block into a typed result.

    Malformed input is returned as an ``ErrorResult``, never raised.
    """
    return _default_parser.parse(content)


def parse_for_display(content: str) -> DisplayProperties:
    """Parse one ``?[...]`` block into flat display properties, falling back to
    a placeholder holding the raw text when the block is malformed."""
    return _default_parser.parse_for_display(content)


__all__ = [
    "Button",
    "ButtonsOnly",
    "ButtonsWithText",
    "DisplayProperties",
    "ELEMENT_NAME",
    "ErrorResult",
    "InteractionNode",
    "InteractionParser",
    "InteractionType",
    "MalformedInteractionError",
    "NonAssignmentButtons",
    "ParseResult",
    "TextOnly",
    "create_interaction_parser",
    "find_interactions",
    "parse",
    "parse_for_display",
    "parse_interaction_format",
    "should_skip",
    "split_interactions",
]
