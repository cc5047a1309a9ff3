import click
from vcsrepo.config import load_config, get_config_path
from vcsrepo.exit_codes import ConfigError
import json
import sys


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("show")
@click.argument("section", required=False)
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
def show_config(section, pretty):
    """Show the current configuration with all merges applied.

    SECTION: Only show this section (e.g. drivers, github)

    By default, outputs single-line JSON (JSONL format).
    Use --pretty for human-readable formatted output.
    """
    config = load_config()

    if section:
        if section not in config:
            error = ConfigError(f"Unknown configuration section: {section}")
            print(json.dumps({"error": str(error), "type": "ConfigError", "exit_code": error.exit_code}))
            sys.exit(error.exit_code)
        config = config[section]

    if pretty:
        print(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        print(json.dumps(config, ensure_ascii=False))


@config_cmd.command("path")
def config_path():
    """Show the config file path being used."""
    path = get_config_path()
    print(json.dumps({"config_path": str(path), "exists": path.exists()}))
