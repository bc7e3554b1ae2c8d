import os

import pytest

from agentteam.generator import ConfigGenerator, generate_config_template
from agentteam.team_config import ConfigError, load_team_config_from_path


def _agents_dir(home):
    return os.path.join(str(home), ".claude", "claude-code-agents")


def test_generate_config_writes_template_and_subdirectories(tmp_path):
    generator = ConfigGenerator(str(tmp_path))
    generator.generate_config("KEY=value\n")
    target = os.path.join(_agents_dir(tmp_path), "agents.conf")
    assert generator.target_path == target
    with open(target, encoding="utf-8") as handle:
        assert handle.read() == "KEY=value\n"
    for name in ("logs", "instructions", "auth_backup"):
        assert os.path.isdir(os.path.join(_agents_dir(tmp_path), name))
    assert not os.path.exists(target + ".tmp")


def test_generate_config_refuses_to_overwrite(tmp_path):
    generator = ConfigGenerator(str(tmp_path))
    generator.generate_config("first\n")
    with pytest.raises(ConfigError, match="already exists"):
        ConfigGenerator(str(tmp_path)).generate_config("second\n")
    with open(generator.target_path, encoding="utf-8") as handle:
        assert handle.read() == "first\n"


def test_force_generate_backs_up_existing_file(tmp_path):
    ConfigGenerator(str(tmp_path)).generate_config("old\n")
    generator = ConfigGenerator(str(tmp_path))
    generator.force_generate_config("new\n")
    with open(generator.target_path, encoding="utf-8") as handle:
        assert handle.read() == "new\n"
    with open(generator.backup_path, encoding="utf-8") as handle:
        assert handle.read() == "old\n"
    assert os.path.basename(generator.backup_path).startswith("agents.conf.backup.")


def test_force_generate_without_existing_file_makes_no_backup(tmp_path):
    generator = ConfigGenerator(str(tmp_path))
    generator.force_generate_config("fresh\n")
    target = os.path.join(_agents_dir(tmp_path), "agents.conf")
    assert generator.config_info() == (target, True)
    with open(target, encoding="utf-8") as handle:
        assert handle.read() == "fresh\n"
    backups = [name for name in os.listdir(_agents_dir(tmp_path)) if ".backup." in name]
    assert backups == []


def test_success_message_printed(tmp_path, capsys):
    generator = ConfigGenerator(str(tmp_path))
    generator.generate_config("x=1\n")
    out = capsys.readouterr().out
    assert "🎉 Configuration file generated successfully!" in out
    assert f"📁 Location: {generator.target_path}" in out


def test_force_message_mentions_backup(tmp_path, capsys):
    ConfigGenerator(str(tmp_path)).generate_config("x=1\n")
    capsys.readouterr()
    generator = ConfigGenerator(str(tmp_path))
    generator.force_generate_config("x=2\n")
    out = capsys.readouterr().out
    assert "(Force mode)" in out
    assert f"💾 Backup: {generator.backup_path}" in out


def test_config_info_reports_existence(tmp_path):
    generator = ConfigGenerator(str(tmp_path))
    path, exists = generator.config_info()
    assert path == os.path.join(_agents_dir(tmp_path), "agents.conf")
    assert exists is False
    generator.generate_config("x\n")
    assert generator.config_info() == (path, True)


def test_validate_config_directory_missing(tmp_path):
    with pytest.raises(ConfigError, match="does not exist"):
        ConfigGenerator(str(tmp_path)).validate_config_directory()


def test_validate_config_directory_leaves_no_test_file(tmp_path):
    generator = ConfigGenerator(str(tmp_path))
    generator.generate_config("x\n")
    generator.validate_config_directory()
    entries = sorted(os.listdir(_agents_dir(tmp_path)))
    assert entries == ["agents.conf", "auth_backup", "instructions", "logs"]
    assert generator.config_info() == (os.path.join(_agents_dir(tmp_path), "agents.conf"), True)


def test_template_loads_as_team_config(tmp_path):
    path = tmp_path / "agents.conf"
    path.write_text(generate_config_template(), encoding="utf-8")
    config = load_team_config_from_path(str(path), home=str(tmp_path), working_dir=str(tmp_path))
    assert config.session_name == "ai-teams"
    assert config.dev_count == 4
    assert config.claude_cli_path == "~/.claude/local/claude"
    assert config.dev_instruction_file == "developer.md"
    assert config.auto_attach is False


def test_template_header():
    assert generate_config_template().startswith("# Claude Code Agents Configuration File\n")