import os

import pytest

from agentteam.cli import (
    Action,
    ParsedArguments,
    UsageError,
    display_session_config,
    generate_config_command,
    is_valid_session_name,
    main,
    parse_arguments,
)
from agentteam.generator import generate_config_template
from agentteam.team_config import ConfigError
from agentteam.usage import usage_text


@pytest.mark.parametrize(
    "name, expected",
    [
        ("ai-teams", True),
        ("my_project2", True),
        ("", False),
        ("has space", False),
        ("dot.name", False),
        ("日本", False),
    ],
)
def test_is_valid_session_name(name, expected):
    assert is_valid_session_name(name) is expected


def test_parse_session_with_flags():
    parsed = parse_arguments(["proj", "--reset", "-v", "-s"])
    assert parsed == ParsedArguments(
        action=Action.LAUNCH, session_name="proj", reset=True, verbose=True, silent=True
    )


def test_parse_empty_is_launch_without_session():
    parsed = parse_arguments([])
    assert parsed.action is Action.LAUNCH
    assert parsed.session_name == ""


def test_parse_two_session_names_fails():
    with pytest.raises(UsageError) as info:
        parse_arguments(["a", "b"])
    assert info.value.show_usage is True


def test_parse_unknown_option_fails():
    with pytest.raises(UsageError) as info:
        parse_arguments(["--bogus"])
    assert "--bogus" in info.value.message


def test_parse_help_wins_and_keeps_flags():
    parsed = parse_arguments(["--verbose", "--help", "--bogus"])
    assert parsed.action is Action.HELP
    assert parsed.verbose is True


def test_parse_first_action_wins():
    assert parse_arguments(["--list", "--bogus"]).action is Action.LIST


def test_parse_delete_requires_name():
    with pytest.raises(UsageError):
        parse_arguments(["--delete"])
    with pytest.raises(UsageError):
        parse_arguments(["--delete", "--list"])


def test_parse_delete_with_name():
    parsed = parse_arguments(["--delete", "myproject"])
    assert (parsed.action, parsed.session_name) == (Action.DELETE, "myproject")


def test_parse_config_defaults_session():
    parsed = parse_arguments(["--config"])
    assert (parsed.action, parsed.session_name) == (Action.SESSION_CONFIG, "ai-teams")
    assert parse_arguments(["--config", "ai-team"]).session_name == "ai-team"


def test_parse_generate_config_force():
    assert parse_arguments(["--generate-config"]).force is False
    parsed = parse_arguments(["--generate-config", "--force"])
    assert (parsed.action, parsed.force) == (Action.GENERATE_CONFIG, True)


def test_parse_init_variants():
    parsed = parse_arguments(["--init", "en", "--force"])
    assert (parsed.action, parsed.language, parsed.force) == (Action.INIT, "en", True)
    with pytest.raises(UsageError):
        parse_arguments(["--init", "fr"])
    with pytest.raises(UsageError):
        parse_arguments(["--init"])
    with pytest.raises(UsageError):
        parse_arguments(["--init", "--force"])


def test_parse_debug_and_doctor():
    parsed = parse_arguments(["-d", "--doctor"])
    assert parsed.debug is True
    assert parsed.action is Action.DOCTOR


def test_generate_config_command_writes_template(tmp_path, capsys):
    target = generate_config_command(False, str(tmp_path))
    assert target == os.path.join(str(tmp_path), ".claude", "claude-code-agents", "agents.conf")
    with open(target, encoding="utf-8") as handle:
        assert handle.read() == generate_config_template()
    assert "Configuration file generation completed" in capsys.readouterr().out


def test_generate_config_command_refuses_existing(tmp_path):
    generate_config_command(False, str(tmp_path))
    with pytest.raises(ConfigError):
        generate_config_command(False, str(tmp_path))


def test_generate_config_command_force_backs_up(tmp_path):
    target = generate_config_command(False, str(tmp_path))
    with open(target, "w", encoding="utf-8") as handle:
        handle.write("OLD=1\n")
    generate_config_command(True, str(tmp_path))
    directory = os.path.dirname(target)
    backups = [name for name in os.listdir(directory) if name.startswith("agents.conf.backup.")]
    assert len(backups) == 1
    with open(os.path.join(directory, backups[0]), encoding="utf-8") as handle:
        assert handle.read() == "OLD=1\n"
    with open(target, encoding="utf-8") as handle:
        assert handle.read() == generate_config_template()


def test_display_session_config(capsys):
    display_session_config("myproj")
    out = capsys.readouterr().out
    assert "Session Configuration Details: myproj" in out
    assert "Session Name:         myproj" in out


def test_main_help_prints_usage(capsys):
    assert main(["-h"]) == 0
    assert capsys.readouterr().out == usage_text()


def test_main_unknown_option(capsys):
    assert main(["--nope"]) == 1
    out = capsys.readouterr().out
    assert "Unknown option --nope" in out
    assert usage_text() in out


def test_main_no_arguments_shows_usage(capsys):
    assert main([]) == 1
    assert usage_text() in capsys.readouterr().out


def test_main_init_creates_layout(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert main(["--init", "ja"]) == 0
    agents_dir = tmp_path / ".claude" / "claude-code-agents"
    for name in ("instructions", "auth_backup", "logs"):
        assert (agents_dir / name).is_dir()
    assert (agents_dir / "agents.conf").read_text(encoding="utf-8") == generate_config_template()
    assert main(["--init", "ja"]) == 1
    assert main(["--init", "ja", "--force"]) == 0


def test_main_generate_config(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert main(["--generate-config"]) == 0
    assert (tmp_path / ".claude" / "claude-code-agents" / "agents.conf").is_file()
    assert main(["--generate-config"]) == 1


def test_main_session_config(capsys):
    assert main(["--config", "team-x"]) == 0
    assert "Session Name:         team-x" in capsys.readouterr().out