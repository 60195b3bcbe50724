from pathlib import Path

import structlog

from slashgate.client import BotClient
from slashgate.logging import get_logger, setup_logging
from slashgate.runtime import build_dispatcher
from slashgate.settings import SlashgateSettings


def test_build_dispatcher_wires_settings(tmp_path: Path) -> None:
    config_path = tmp_path / "slashgate.toml"
    settings = SlashgateSettings(
        guild_id=5, owners=[1, 2], modules_dir="mods", support_url="https://x.invalid"
    )

    dispatcher = build_dispatcher(settings, config_path=config_path, token="tok")

    assert isinstance(dispatcher.client, BotClient)
    assert dispatcher.client._interaction_handler == dispatcher.handle_interaction
    assert dispatcher.owners == frozenset({1, 2})
    assert dispatcher.guild_id == 5
    assert dispatcher.support_url == "https://x.invalid"
    assert dispatcher.source.directory == tmp_path / "mods"


def test_setup_logging_writes_to_current_stderr(capsys) -> None:
    setup_logging(debug=True)
    try:
        get_logger(__name__).info("runtime.test_event", answer=42)
        captured = capsys.readouterr()
        assert "runtime.test_event" in captured.err
    finally:
        structlog.reset_defaults()
