from __future__ import annotations

from collections.abc import Iterator

from .commands import Command
from .schema import CommandPayload, build_payload


class CommandRegistry:
    """Commands keyed by name, remembering which module registered each one.

    Re-registering a name overwrites the previous definition; reloads rely on it.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._owners: dict[str, str | None] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._commands.values()))

    def __len__(self) -> int:
        return len(self._commands)

    def register(self, command: Command, *, module: str | None = None) -> None:
        command.validate()
        self._commands[command.name] = command
        self._owners[command.name] = module

    def remove(self, *names: str) -> list[str]:
        removed: list[str] = []
        for name in names:
            if self._commands.pop(name, None) is not None:
                removed.append(name)
            self._owners.pop(name, None)
        return removed

    def get(self, name: str) -> Command | None:
        return self._commands.get(name)

    def names(self) -> list[str]:
        return list(self._commands)

    def owned_by(self, module: str) -> set[str]:
        return {name for name, owner in self._owners.items() if owner == module}

    def clear(self) -> None:
        self._commands.clear()
        self._owners.clear()

    def payload(self) -> list[CommandPayload]:
        return build_payload(self)
