"""Layered parser for inline interaction blocks.

An interaction block is a bracketed span such as ``?[Continue]`` or
``?[%{{color}} Red//r | Blue//b | ...Custom color]``. Parsing runs in three
layers, each of which either hands its output to the next or decides the
result on its own:

1. format validation: the whole string must be one ``?[...]`` block
2. variable detection: an optional ``%{{name}}`` marker at the start
3. content parsing: buttons, ``display//value`` pairs and the ``...`` prompt

``InteractionParser.parse`` returns a typed result (see ``models``);
``InteractionParser.parse_for_display`` flattens it for rendering and never
fails.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from lark import Lark
from lark.exceptions import UnexpectedInput

from .errors import MalformedInteractionError
from .models import (Button, Buttons, ButtonsOnly, ButtonsWithText,
                     DisplayProperties, ErrorResult, InteractionType,
                     NonAssignmentButtons, ParseResult, TextOnly)

logger = logging.getLogger(__name__)

# Layer 1: ?[content], but not the ?[text](url) link form
INTERACTION_PATTERN = re.compile(r"\?\[([^\]]*)\](?!\()")

# Layer 3
ELLIPSIS = "..."
OPTION_SEPARATOR_PATTERN = re.compile(r"[|｜]")
BUTTON_VALUE_PATTERN = re.compile(r"^(.+?)//(.+)$", re.DOTALL)

# Layer 2: %{{name}} followed by anything. Names start with a letter,
# underscore or CJK ideograph; digits are allowed after the first character.
_variable_marker_grammar = r"""
start: _MARKER_OPEN NAME _MARKER_CLOSE REST?

_MARKER_OPEN: /%\{\{\s*/
_MARKER_CLOSE: /\s*\}\}/
NAME: /[a-zA-Z_\u4e00-\u9fa5][a-zA-Z0-9_\u4e00-\u9fa5]*/
REST: /.+/s
"""

_cached_variable_parser = None


def _get_variable_marker_parser() -> Lark:
    """Get cached parser for the %{{name}} marker."""
    global _cached_variable_parser
    if _cached_variable_parser is None:
        _cached_variable_parser = Lark(_variable_marker_grammar, parser="lalr")
    return _cached_variable_parser


def has_separator(content: str) -> bool:
    return OPTION_SEPARATOR_PATTERN.search(content) is not None


class InteractionParser:
    """Stateless parser for ``?[...]`` interaction blocks.

    Instances hold no per-call state and can be shared between threads.
    """

    def parse(self, content: str) -> ParseResult:
        """Parse one interaction block.

        Args:
            content: The raw block, including the ``?[`` and ``]`` markers

        Returns:
            One of TextOnly, ButtonsOnly, ButtonsWithText or
            NonAssignmentButtons; an ErrorResult if ``content`` is not a
            well-formed block
        """
        try:
            return self._parse_or_raise(content)
        except MalformedInteractionError as e:
            logger.debug(f"Rejected interaction block {content!r}: {e}")
            return ErrorResult(message=str(e), content=content)

    def parse_for_display(self, content: str) -> DisplayProperties:
        """Parse a block into flat display properties.

        Malformed blocks are not reported: the trimmed raw content becomes the
        placeholder so it still renders as readable text.
        """
        return self.normalize(self.parse(content), content)

    def normalize(self, result: ParseResult, content: str) -> DisplayProperties:
        """Flatten a parse result into display properties.

        Args:
            result: Result of ``parse``
            content: The raw block ``result`` was parsed from, used as the
                placeholder when ``result`` is an error
        """
        if isinstance(result, ErrorResult):
            return DisplayProperties(placeholder=content.strip())
        if isinstance(result, NonAssignmentButtons):
            return DisplayProperties.from_buttons(result.buttons)
        if isinstance(result, TextOnly):
            return DisplayProperties(
                variable_name=result.variable, placeholder=result.question
            )
        if isinstance(result, ButtonsOnly):
            return DisplayProperties.from_buttons(
                result.buttons, variable_name=result.variable
            )
        if isinstance(result, ButtonsWithText):
            return DisplayProperties.from_buttons(
                result.buttons,
                variable_name=result.variable,
                placeholder=result.question,
            )
        raise TypeError(f"Unknown parse result: {result!r}")

    def _parse_or_raise(self, content: str) -> ParseResult:
        inner = self.validate_format(content)
        if inner is None:
            raise MalformedInteractionError(
                f"Invalid interaction format: {content}", content=content
            )

        try:
            has_variable, variable_name, remaining = self.detect_variable(inner)
            if has_variable:
                return self.resolve_variable(variable_name, remaining)
            return self.resolve_buttons(inner)
        except Exception as e:
            logger.warning(f"Unexpected error parsing {content!r}: {e}")
            raise MalformedInteractionError(
                f"Parsing error: {e}", content=content, original_error=e
            ) from e

    def validate_format(self, content: str) -> Optional[str]:
        """Check ``content`` is exactly one ``?[...]`` block.

        Returns:
            The text between the brackets, untrimmed, or None if ``content``
            is not a block or has text around it
        """
        content = content.strip()
        match = INTERACTION_PATTERN.search(content)
        if not match:
            return None
        if match.group(0) != content:
            return None
        return match.group(1)

    def detect_variable(self, inner: str) -> Tuple[bool, Optional[str], str]:
        """Split a leading ``%{{name}}`` marker off the block content.

        Returns:
            (has_variable, variable_name, remaining_content). Without a valid
            marker the whole of ``inner`` is returned unchanged as the
            remaining content.
        """
        try:
            tree = _get_variable_marker_parser().parse(inner)
        except UnexpectedInput:
            return False, None, inner

        name, *rest = tree.children
        remaining = str(rest[0]) if rest else ""
        return True, str(name).strip(), remaining.strip()

    def resolve_variable(self, variable_name: str, content: str) -> ParseResult:
        """Parse the content that follows a ``%{{name}}`` marker.

        ``a | b | ...question`` gives buttons plus a text prompt,
        ``...question`` a text prompt alone, ``a | b`` or ``a`` buttons alone,
        and empty content a text input with no prompt.
        """
        before, ellipsis, question = content.partition(ELLIPSIS)

        if ellipsis:
            question = question.strip()
            before = before.strip()
            buttons = self.parse_buttons(before) if before else ()
            if buttons:
                return ButtonsWithText(
                    variable=variable_name, buttons=buttons, question=question
                )
            return TextOnly(variable=variable_name, question=question)

        if content and has_separator(content):
            buttons = self.parse_buttons(content)
            if buttons:
                return ButtonsOnly(variable=variable_name, buttons=buttons)
        elif content:
            return ButtonsOnly(
                variable=variable_name, buttons=(self.parse_single_button(content),)
            )

        # ?[%{{var}}], or content made only of separators
        return TextOnly(variable=variable_name, question="")

    def resolve_buttons(self, content: str) -> NonAssignmentButtons:
        """Parse a block without a variable into action buttons."""
        if not content:
            # ?[]
            return NonAssignmentButtons(buttons=(Button(display="", value=""),))

        if has_separator(content):
            buttons = self.parse_buttons(content)
            if not buttons:
                buttons = (Button(display="", value=""),)
            return NonAssignmentButtons(buttons=buttons)

        return NonAssignmentButtons(buttons=(self.parse_single_button(content),))

    def parse_buttons(self, content: str) -> Buttons:
        """Split on ``|`` or ``｜`` into buttons, dropping empty options."""
        buttons: List[Button] = []
        for option in OPTION_SEPARATOR_PATTERN.split(content):
            option = option.strip()
            if option:
                buttons.append(self.parse_single_button(option))
        return tuple(buttons)

    def parse_single_button(self, text: str) -> Button:
        """Parse ``Label`` or ``Label//value`` into a Button."""
        text = text.strip()
        match = BUTTON_VALUE_PATTERN.match(text)
        if match:
            return Button(display=match.group(1).strip(), value=match.group(2).strip())
        return Button(display=text, value=text)


def create_interaction_parser() -> InteractionParser:
    return InteractionParser()


def parse_interaction_format(content: str) -> Tuple[InteractionType, Dict[str, Any]]:
    """Parse a block into an ``(InteractionType, data)`` pair.

    ``data`` holds whichever of ``variable``, ``buttons`` and ``question`` the
    result carries. A malformed block is reported as a text-only interaction
    whose question is the trimmed raw content.

    Examples:
        >>> parse_interaction_format("?[%{{name}}...Your name?]")
        (<InteractionType.TEXT_ONLY: 'text_only'>, {'variable': 'name', 'question': 'Your name?'})
    """
    result = InteractionParser().parse(content)

    if isinstance(result, ErrorResult):
        return InteractionType.TEXT_ONLY, {"question": content.strip()}

    data = {}
    for field in ("variable", "buttons", "question"):
        if hasattr(result, field):
            value = getattr(result, field)
            data[field] = list(value) if field == "buttons" else value
    return result.type, data
