"""Message components (buttons and selects) laid out in action rows.

Every non-link component gets a custom id of the form ``<command>-<action>``;
the router takes the prefix before the first ``-`` to find the command whose
component handler should receive the interaction.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import discord

from .errors import ComponentError
from .options import Range

MAX_ROWS = 5
MAX_BUTTONS_PER_ROW = 5
CUSTOM_ID_SEPARATOR = "-"
# Seconds; matches the lifetime Pycord gives ephemeral views.
VIEW_TIMEOUT = 15 * 60.0

_ACTION_ROW = 1
_BUTTON = 2
_STRING_SELECT = 3

type Emoji = str | discord.PartialEmoji


class RoutedView(discord.ui.View):
    """A view whose clicks arrive through the dispatcher, never Pycord's view store."""

    def __init__(self) -> None:
        super().__init__(timeout=VIEW_TIMEOUT)

    def is_dispatchable(self) -> bool:
        return False


def make_custom_id(command: str, action: str) -> str:
    return f"{command}{CUSTOM_ID_SEPARATOR}{action}"


def parse_custom_id(custom_id: str) -> tuple[str, str]:
    """Split ``"foo-bar-42"`` into ``("foo", "bar-42")``."""
    command, _, action = custom_id.partition(CUSTOM_ID_SEPARATOR)
    return command, action


def _style_value(style: discord.ButtonStyle | int) -> int:
    return int(getattr(style, "value", style))


def _emoji_payload(emoji: Emoji) -> dict[str, Any]:
    if isinstance(emoji, str):
        return {"name": emoji}
    return emoji.to_dict()


@dataclass(frozen=True, slots=True)
class ButtonComponent:
    style: int
    action: str | None = None
    url: str | None = None
    label: str | None = None
    emoji: Emoji | None = None

    @property
    def is_link(self) -> bool:
        return self.url is not None


@dataclass(frozen=True, slots=True)
class SelectChoice:
    label: str
    value: str
    description: str | None = None
    emoji: Emoji | None = None
    default: bool = False


@dataclass(frozen=True, slots=True)
class SelectComponent:
    id: str
    choices: tuple[SelectChoice, ...]
    choice_count: Range | None = None
    placeholder: str | None = None


def _coerce_select_choice(choice: SelectChoice | tuple[str, str]) -> SelectChoice:
    if isinstance(choice, SelectChoice):
        return choice
    label, value = choice
    return SelectChoice(label=label, value=value)


class ActionRow:
    """One row holding either up to five buttons or a single select."""

    def __init__(self, parent: ComponentDefinition) -> None:
        self._parent = parent
        self.buttons: list[ButtonComponent] = []
        self.select: SelectComponent | None = None

    def _check_button_slot(self, what: str) -> None:
        if self.select is not None:
            raise ComponentError(
                f"{what} for command {self._parent.command} is not allowed "
                "since this action row already has a select component."
            )
        if len(self.buttons) >= MAX_BUTTONS_PER_ROW:
            raise ComponentError(
                f"{what} for command {self._parent.command} exceeds "
                f"{MAX_BUTTONS_PER_ROW} buttons in one action row."
            )

    def add_button(
        self,
        action: str,
        style: discord.ButtonStyle | int = discord.ButtonStyle.primary,
        *,
        label: str | None = None,
        emoji: Emoji | None = None,
    ) -> ActionRow:
        if _style_value(style) == discord.ButtonStyle.link.value:
            raise ComponentError(
                "add_button may not be used to register link buttons. Use "
                f"add_link_button instead. For command {self._parent.command}, "
                f"action {action}"
            )
        self._check_button_slot(f"add_button with action {action}")
        self.buttons.append(
            ButtonComponent(
                style=_style_value(style), action=action, label=label, emoji=emoji
            )
        )
        return self

    def add_link_button(
        self, url: str, label: str | None = None, *, emoji: Emoji | None = None
    ) -> ActionRow:
        self._check_button_slot(f"add_link_button to URL {url}")
        self.buttons.append(
            ButtonComponent(
                style=discord.ButtonStyle.link.value, url=url, label=label, emoji=emoji
            )
        )
        return self

    def add_select(
        self,
        id: str,
        choices: Iterable[SelectChoice | tuple[str, str]],
        *,
        choice_count: Range | tuple[int, int] | None = None,
        placeholder: str | None = None,
    ) -> ActionRow:
        if self.buttons:
            raise ComponentError(
                f"add_select for command {self._parent.command} is not allowed "
                "since this action row already has a button component."
            )
        if self.select is not None:
            raise ComponentError(
                f"add_select for command {self._parent.command} is not allowed "
                "since this action row already has a select component."
            )
        if isinstance(choice_count, tuple):
            choice_count = Range(min=choice_count[0], max=choice_count[1])
        self.select = SelectComponent(
            id=id,
            choices=tuple(_coerce_select_choice(c) for c in choices),
            choice_count=choice_count,
            placeholder=placeholder,
        )
        return self

    def done(self) -> ComponentDefinition:
        self._parent._attach_row(self)
        return self._parent

    def is_empty(self) -> bool:
        return not self.buttons and self.select is None

    def to_payload(self) -> dict[str, Any]:
        command = self._parent.command
        components: list[dict[str, Any]] = []
        for button in self.buttons:
            item: dict[str, Any] = {"type": _BUTTON, "style": button.style}
            if button.is_link:
                item["url"] = button.url
            else:
                item["custom_id"] = make_custom_id(command, button.action or "")
            if button.label is not None:
                item["label"] = button.label
            if button.emoji is not None:
                item["emoji"] = _emoji_payload(button.emoji)
            components.append(item)
        if self.select is not None:
            components.append(_select_payload(command, self.select))
        return {"type": _ACTION_ROW, "components": components}


def _select_payload(command: str, select: SelectComponent) -> dict[str, Any]:
    options: list[dict[str, Any]] = []
    for choice in select.choices:
        option: dict[str, Any] = {"label": choice.label, "value": choice.value}
        if choice.description is not None:
            option["description"] = choice.description
        if choice.emoji is not None:
            option["emoji"] = _emoji_payload(choice.emoji)
        if choice.default:
            option["default"] = True
        options.append(option)
    payload: dict[str, Any] = {
        "type": _STRING_SELECT,
        "custom_id": make_custom_id(command, select.id),
        "options": options,
    }
    if select.placeholder is not None:
        payload["placeholder"] = select.placeholder
    if select.choice_count is not None:
        if select.choice_count.min is not None:
            payload["min_values"] = int(select.choice_count.min)
        if select.choice_count.max is not None:
            payload["max_values"] = int(select.choice_count.max)
    return payload


class ComponentDefinition:
    """Components for one outgoing message, owned by ``command``."""

    def __init__(self, command: str) -> None:
        self.command = command
        self.rows: list[ActionRow] = []

    def add_row(self) -> ActionRow:
        if len(self.rows) >= MAX_ROWS:
            raise ComponentError(
                f"Command {self.command} may not send more than {MAX_ROWS} action rows."
            )
        return ActionRow(self)

    def _attach_row(self, row: ActionRow) -> None:
        if row.is_empty():
            raise ComponentError(f"Command {self.command} attached an empty action row.")
        if len(self.rows) >= MAX_ROWS:
            raise ComponentError(
                f"Command {self.command} may not send more than {MAX_ROWS} action rows."
            )
        self.rows.append(row)

    def to_payload(self) -> list[dict[str, Any]]:
        return [row.to_payload() for row in self.rows]

    def to_view(self) -> RoutedView:
        """Build a Pycord view; must be called while an event loop is running."""
        view = RoutedView()
        for index, row in enumerate(self.rows):
            for button in row.buttons:
                view.add_item(
                    discord.ui.Button(
                        style=discord.ButtonStyle(button.style),
                        label=button.label,
                        emoji=button.emoji,
                        url=button.url,
                        custom_id=None
                        if button.is_link
                        else make_custom_id(self.command, button.action or ""),
                        row=index,
                    )
                )
            if row.select is not None:
                view.add_item(_build_select(self.command, row.select, index))
        return view


def _build_select(command: str, select: SelectComponent, row: int) -> discord.ui.Select:
    min_values = 1
    max_values = 1
    if select.choice_count is not None:
        if select.choice_count.min is not None:
            min_values = int(select.choice_count.min)
        if select.choice_count.max is not None:
            max_values = int(select.choice_count.max)
    return discord.ui.Select(
        custom_id=make_custom_id(command, select.id),
        placeholder=select.placeholder,
        min_values=min_values,
        max_values=max_values,
        options=[
            discord.SelectOption(
                label=choice.label,
                value=choice.value,
                description=choice.description,
                emoji=choice.emoji,
                default=choice.default,
            )
            for choice in select.choices
        ],
        row=row,
    )
