from collections.abc import Callable
from pathlib import Path

import pytest

from slashgate.loader import DirectoryModuleSource
from slashgate.router import Dispatcher
from tests.discord_fakes import FakeClient

OWNER_ID = 100


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def modules_dir(tmp_path: Path) -> Path:
    path = tmp_path / "modules"
    path.mkdir()
    return path


@pytest.fixture
def write_module(modules_dir: Path) -> Callable[[str, str], Path]:
    def _write(name: str, source: str) -> Path:
        path = modules_dir / f"{name}.py"
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def dispatcher(fake_client: FakeClient, modules_dir: Path) -> Dispatcher:
    return Dispatcher(
        fake_client,  # type: ignore[arg-type]
        DirectoryModuleSource(modules_dir),
        owners=[OWNER_ID],
        guild_id=555,
        support_url="https://example.invalid/support",
    )
