import os
from datetime import timedelta

import pytest

from agentteam.team_config import (
    ConfigError,
    TeamConfig,
    default_team_config,
    format_duration,
    load_team_config_from_path,
    parse_duration,
    render_team_config,
)


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return str(path)


def test_default_paths_under_home(home):
    config = default_team_config(home, "/work")
    agents_dir = os.path.join(home, ".claude", "claude-code-agents")
    assert config.claude_cli_path == os.path.join(home, ".claude", "local", "claude")
    assert config.instructions_dir == os.path.join(agents_dir, "instructions")
    assert config.config_dir == agents_dir
    assert config.log_file == os.path.join(agents_dir, "logs", "manager.log")
    assert config.auth_backup_dir == os.path.join(agents_dir, "auth_backup")
    assert config.working_dir == "/work"


def test_default_values(home):
    config = default_team_config(home, "/work")
    assert config.session_name == "ai-teams"
    assert config.default_layout == "integrated"
    assert config.send_command == "send-agent"
    assert config.binary_name == "claude-code-agents"
    assert config.dev_count == 4
    assert config.pane_count == 6
    assert config.po_instruction_file == "po.md"
    assert config.dev_instruction_file == "developer.md"
    assert config.auth_check_interval == timedelta(minutes=30)
    assert config.instruction_config is None


def test_missing_file_returns_defaults(home, tmp_path):
    loaded = load_team_config_from_path(str(tmp_path / "absent.conf"), home, "/work")
    assert loaded == default_team_config(home, "/work")


def test_load_overrides_values(home, tmp_path):
    conf = tmp_path / "agents.conf"
    conf.write_text(
        "# comment\n"
        "\n"
        "SESSION_NAME = my-team\n"
        "CLAUDE_CLI_PATH=/opt/claude\n"
        "AUTO_ATTACH=true\n"
        "IDE_BACKUP_ENABLED=false\n"
        "STARTUP_TIMEOUT=20s\n"
        "DEV_COUNT=2\n"
        "WORKING_DIR=/ignored\n"
        "not a setting line\n"
        "UNKNOWN_KEY=value\n",
        encoding="utf-8",
    )
    config = load_team_config_from_path(str(conf), home, "/work")
    assert config.session_name == "my-team"
    assert config.claude_cli_path == "/opt/claude"
    assert config.auto_attach is True
    assert config.ide_backup_enabled is False
    assert config.startup_timeout == timedelta(seconds=20)
    assert config.dev_count == 2
    assert config.working_dir == "/work"


def test_invalid_values_keep_defaults(home, tmp_path):
    conf = tmp_path / "agents.conf"
    conf.write_text("DEV_COUNT=0\nRESTART_DELAY=soon\nAUTO_ATTACH=yes\n", encoding="utf-8")
    config = load_team_config_from_path(str(conf), home, "/work")
    defaults = default_team_config(home, "/work")
    assert config.dev_count == defaults.dev_count
    assert config.restart_delay == defaults.restart_delay
    assert config.auto_attach is False


def test_value_may_contain_equals(home, tmp_path):
    conf = tmp_path / "agents.conf"
    conf.write_text("SEND_COMMAND=send=agent\n", encoding="utf-8")
    config = load_team_config_from_path(str(conf), home, "/work")
    assert config.send_command == "send=agent"


def test_directory_traversal_rejected(home, tmp_path, monkeypatch):
    (tmp_path / "agents.conf").write_text("SESSION_NAME=x\n", encoding="utf-8")
    sub = tmp_path / "sub"
    sub.mkdir()
    monkeypatch.chdir(sub)
    with pytest.raises(ConfigError, match="directory traversal"):
        load_team_config_from_path(os.path.join("..", "agents.conf"), home, "/work")


def test_render_round_trip(home, tmp_path):
    config = default_team_config(home, "/work")
    config.session_name = "round-trip"
    config.auto_attach = True
    config.dev_count = 3
    config.restart_delay = timedelta(seconds=1, milliseconds=500)
    conf = tmp_path / "agents.conf"
    conf.write_text(render_team_config(config), encoding="utf-8")
    assert load_team_config_from_path(str(conf), home, "/work") == config


def test_render_contains_settings(home):
    text = render_team_config(default_team_config(home, "/work"))
    assert "SESSION_NAME=ai-teams\n" in text
    assert "AUTO_ATTACH=false\n" in text
    assert "HEALTH_CHECK_INTERVAL=30s\n" in text


@pytest.mark.parametrize(
    "text, expected",
    [
        ("30s", timedelta(seconds=30)),
        ("30m", timedelta(minutes=30)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("1.5s", timedelta(seconds=1.5)),
        ("250ms", timedelta(milliseconds=250)),
        ("-5s", timedelta(seconds=-5)),
        ("0", timedelta(0)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "5", "abc", "5x", ".s", "1h-2m"])
def test_parse_duration_invalid(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_format_duration_pinned():
    assert format_duration(timedelta(seconds=30)) == "30s"
    assert format_duration(timedelta(0)) == "0s"


@pytest.mark.parametrize(
    "duration",
    [
        timedelta(minutes=30),
        timedelta(hours=2, seconds=7),
        timedelta(milliseconds=1500),
        timedelta(microseconds=250),
        timedelta(milliseconds=3),
        timedelta(seconds=-42),
    ],
)
def test_format_parse_round_trip(duration):
    assert parse_duration(format_duration(duration)) == duration


def test_set_dev_count_updates_panes():
    config = TeamConfig()
    config.set_dev_count(2)
    assert config.dev_count == 2
    assert config.pane_count == 4
    config.set_dev_count(0)
    assert config.dev_count == 2


def test_agent_list_and_maps():
    config = TeamConfig(dev_count=2)
    assert config.agent_list() == ["po", "manager", "dev1", "dev2"]
    assert config.pane_agent_map() == {"1": "po", "2": "manager", "3": "dev1", "4": "dev2"}
    assert config.pane_titles() == {"1": "PO", "2": "Manager", "3": "Dev1", "4": "Dev2"}


def test_agent_list_length_matches_panes():
    config = TeamConfig()
    config.set_dev_count(5)
    assert len(config.agent_list()) == config.pane_count
    assert sorted(config.pane_agent_map().values()) == sorted(config.agent_list())