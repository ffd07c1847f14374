"""Typed results produced by the interaction parser.

Each successful parse yields exactly one of the four interaction variants;
a failed parse yields an ``ErrorResult`` value. ``DisplayProperties`` is the
flattened form attached to rendered nodes.
"""

from enum import Enum
from typing import Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class InteractionType(str, Enum):
    TEXT_ONLY = "text_only"  # ?[%{{var}}...question]
    BUTTONS_ONLY = "buttons_only"  # ?[%{{var}} a | b]
    BUTTONS_WITH_TEXT = "buttons_with_text"  # ?[%{{var}} a | b | ...question]
    NON_ASSIGNMENT_BUTTON = "non_assignment_button"  # ?[Continue] or ?[Continue | Cancel]


class Button(BaseModel):
    """A selectable option: the label shown and the value reported."""

    model_config = ConfigDict(frozen=True)

    display: str
    value: str

    @model_validator(mode="before")
    @classmethod
    def _value_defaults_to_display(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("value") is None:
            data = {**data, "value": data.get("display")}
        return data

    def __str__(self):
        if self.display == self.value:
            return self.display
        return f"{self.display}//{self.value}"


Buttons = Tuple[Button, ...]


class TextOnly(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[InteractionType.TEXT_ONLY] = InteractionType.TEXT_ONLY
    variable: str
    question: str


class ButtonsOnly(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[InteractionType.BUTTONS_ONLY] = InteractionType.BUTTONS_ONLY
    variable: str
    buttons: Buttons = Field(min_length=1)


class ButtonsWithText(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[InteractionType.BUTTONS_WITH_TEXT] = InteractionType.BUTTONS_WITH_TEXT
    variable: str
    buttons: Buttons = Field(min_length=1)
    question: str


class NonAssignmentButtons(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal[InteractionType.NON_ASSIGNMENT_BUTTON] = (
        InteractionType.NON_ASSIGNMENT_BUTTON
    )
    buttons: Buttons = Field(min_length=1)


class ErrorResult(BaseModel):
    """A failed parse. ``content`` is the raw input, ``message`` says why."""

    model_config = ConfigDict(frozen=True)

    type: Literal[None] = None
    message: str
    content: str


ParseResult = Union[TextOnly, ButtonsOnly, ButtonsWithText, NonAssignmentButtons, ErrorResult]


class DisplayProperties(BaseModel):
    """Flattened, presentation-oriented view of a parse result.

    Absent fields are ``None`` and are left out of ``as_properties()``. An
    empty placeholder is kept, so "no prompt" and "no text input" stay
    distinguishable.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    variable_name: Optional[str] = Field(default=None, alias="variableName")
    button_texts: Optional[Tuple[str, ...]] = Field(default=None, alias="buttonTexts")
    button_values: Optional[Tuple[str, ...]] = Field(default=None, alias="buttonValues")
    placeholder: Optional[str] = None

    @model_validator(mode="after")
    def _buttons_are_aligned(self) -> "DisplayProperties":
        if (self.button_texts is None) != (self.button_values is None):
            raise ValueError("buttonTexts and buttonValues must be set together")
        if self.button_texts is not None and len(self.button_texts) != len(
            self.button_values
        ):
            raise ValueError("buttonTexts and buttonValues must have the same length")
        return self

    @classmethod
    def from_buttons(cls, buttons: Buttons, **kwargs) -> "DisplayProperties":
        return cls(
            button_texts=tuple(b.display for b in buttons),
            button_values=tuple(b.value for b in buttons),
            **kwargs,
        )

    def as_properties(self) -> Dict[str, Any]:
        """Return the camelCase property dict used as node metadata."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
