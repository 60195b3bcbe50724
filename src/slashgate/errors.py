from __future__ import annotations


class SlashgateError(Exception):
    pass


class CommandConfigError(SlashgateError):
    """A command mixes sublevels with direct parameters, or a parameter is malformed."""

    def __init__(self, command: str, message: str) -> None:
        super().__init__(f"Slash command {command} - {message}")
        self.command = command


class ComponentError(SlashgateError):
    """An action row was assembled in a way the platform cannot render."""


class InvalidModuleError(SlashgateError):
    """A module file was found but exposes no callable ``init``."""
