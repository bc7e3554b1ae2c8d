# agentteam

Configuration handling and health checks for a team of coding agents (a product
owner, a manager and a number of developers) meant to run side by side in
terminal sessions.

The package reads and writes the team configuration file
(`~/.claude/claude-code-agents/agents.conf`) and the manager settings file
(`manager.json`, JSON), resolves each role's instruction file, validates the
setup and reports what is missing.

## Installation

```
pip install .
```

## Command line

```
agentteam --help
agentteam --init en            # create the directory layout and agents.conf
agentteam --init ja --force    # same, backing up and replacing an existing agents.conf
agentteam --generate-config    # write a configuration template (fails if one exists)
agentteam --generate-config --force
agentteam --show-config        # show the loaded configuration and check its paths
agentteam --config ai-teams    # show a short summary for one session name
agentteam --doctor             # run a system health check; exit status 1 on problems
```

`--verbose`/`-v`, `--silent`/`-s` and `--debug`/`-d` set the logging level.
Unknown options, a missing or invalid `--init` language (`ja` or `en`), and
more than one session name are reported as errors with exit status 1.

The health check looks for the CLI executable (`~/.claude/local/claude`,
`/usr/local/bin/claude`, `/opt/homebrew/bin/claude`, then `PATH`), the
required directories, non-empty `settings.json` and `claude.json` under
`~/.claude`, write access to `~/.claude`, `tmux` on `PATH` and the `SHELL`
variable, and prints advice for each problem found.

## Library use

```python
import os
from pathlib import Path

from agentteam.team_config import load_team_config_from_path, render_team_config
from agentteam.resolver import InstructionResolver
from agentteam.validator import InstructionValidator

home = str(Path.home())
config = load_team_config_from_path(
    os.path.join(home, ".claude", "claude-code-agents", "agents.conf"),
    home=home,
    working_dir=os.getcwd(),
)
print(config.agent_list())          # ['po', 'manager', 'dev1', ...]

resolver = InstructionResolver(config)
print(resolver.resolve_instruction_path("manager"))

result = InstructionValidator(strict_mode=True).validate_config(config)
print(result.is_valid, [e.message for e in result.errors])

print(render_team_config(config))
```

The configuration file uses `KEY=VALUE` lines; blank lines and lines starting
with `#` are ignored, as are unknown keys and values that do not parse.
Durations use forms such as `30s`, `5m` or `1h30m` (`parse_duration` and
`format_duration` in `agentteam.team_config`).

Other modules:

- `agentteam.unified`: standard locations (`get_unified_config_paths`,
  `get_team_config_path`), `load_unified_config` and `TeamConfigLoader`, which
  loads, saves and validates one team configuration file.
- `agentteam.settings`: the JSON manager settings (`load_config`,
  `save_config`, `default_config`), `ResourceMonitor` and `HealthChecker`.
- `agentteam.generator`: `ConfigGenerator` and `generate_config_template`.
- `agentteam.paths`: `PathResolver` for `$VAR`, `~/` and relative paths.
- `agentteam.diagnostics`: the individual health checks and their advice.

## What this package does not do

It does not manage terminal sessions. Launching a team session, and the
`--list`, `--delete` and `--delete-all` options, are recognised on the command
line but end with an error saying that session management is not provided.
`--init` does not supply instruction file contents; it only lists where
`po.md`, `manager.md` and `developer.md` are expected. It does not check the
CLI's authentication beyond the presence of its files.

## Tests

```
pip install .[test]
pytest
```