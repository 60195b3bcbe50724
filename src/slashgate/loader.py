"""Discovery and (re-)import of command modules.

A command module is any Python file exposing a callable ``init(dispatcher)``.
Each load evaluates the file's current source into a brand new module
object, so a reload picks up edits without restarting the process.
"""

from __future__ import annotations

import importlib.util
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Protocol

from .logging import get_logger

logger = get_logger(__name__)

MODULE_NAMESPACE = "slashgate_modules"


@dataclass(frozen=True, slots=True)
class ModuleDescriptor:
    name: str
    path: Path


class ModuleSource(Protocol):
    def enumerate(self) -> list[ModuleDescriptor]: ...

    def find(self, name: str) -> ModuleDescriptor: ...

    def load(self, descriptor: ModuleDescriptor) -> ModuleType: ...


def is_valid_module(module: object) -> bool:
    return callable(getattr(module, "init", None))


class DirectoryModuleSource:
    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def enumerate(self) -> list[ModuleDescriptor]:
        if not self.directory.is_dir():
            logger.warning("modules.dir_missing", path=str(self.directory))
            return []
        return [
            ModuleDescriptor(name=path.stem, path=path)
            for path in sorted(self.directory.glob("*.py"))
            if path.is_file() and not path.name.startswith("_")
        ]

    def find(self, name: str) -> ModuleDescriptor:
        """Resolve a module by file stem; raises FileNotFoundError if absent."""
        cleaned = name.strip().removesuffix(".py")
        if not cleaned or "/" in cleaned or "\\" in cleaned or cleaned.startswith("."):
            raise FileNotFoundError(f"Invalid module name {name!r}")
        path = self.directory / f"{cleaned}.py"
        if not path.is_file():
            raise FileNotFoundError(f"No module file {path}")
        return ModuleDescriptor(name=cleaned, path=path)

    def load(self, descriptor: ModuleDescriptor) -> ModuleType:
        qualified = f"{MODULE_NAMESPACE}.{descriptor.name}"
        spec = importlib.util.spec_from_file_location(qualified, descriptor.path)
        if spec is None:
            raise ImportError(f"Cannot load module from {descriptor.path}")
        module = importlib.util.module_from_spec(spec)
        source = descriptor.path.read_text(encoding="utf-8")
        code = compile(source, str(descriptor.path), "exec")
        previous = sys.modules.get(qualified)
        sys.modules[qualified] = module
        try:
            exec(code, module.__dict__)
        except BaseException:
            if previous is not None:
                sys.modules[qualified] = previous
            else:
                sys.modules.pop(qualified, None)
            raise
        logger.debug("modules.imported", module=descriptor.name, path=str(descriptor.path))
        return module
