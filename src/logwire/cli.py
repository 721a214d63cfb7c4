"""
logwire CLI.

Entry point: `logwire check logging.yaml`

Pipeline:
1. Parse YAML → dict
2. Validate against schema (Pydantic FactoryConfig)
3. Build every formatter, processor, handler and logger
4. Print what was registered
"""

from __future__ import annotations

import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from logwire.config import FactoryConfig
from logwire.errors import LogwireError
from logwire.factory import LoggerFactory
from logwire.logger.records import level_name


USAGE = "Usage: logwire check <logging.yaml>"


def run_cli(args: list[str] | None = None) -> int:
    """
    CLI entry point for `logwire check <logging.yaml>`.

    Returns exit code (0 = success, 1 = error).
    """
    if args is None:
        args = sys.argv[1:]

    if len(args) < 2 or args[0] != "check":
        print(USAGE)
        return 1

    yaml_path = Path(args[1])
    if not yaml_path.exists():
        print(f"Error: Config file not found: {yaml_path}")
        return 1

    try:
        config = FactoryConfig.from_yaml(yaml_path)
        factory = LoggerFactory.from_config(config)
    except (LogwireError, ValidationError, yaml.YAMLError) as exc:
        print(f"✗ {yaml_path}: {exc}")
        return 1

    status = factory.describe()
    print(f"✓ {yaml_path}")
    for fid, kind in status["formatters"].items():
        print(f"  formatter {fid}: {kind}")
    for pid, name in status["processors"].items():
        print(f"  processor {pid}: {name}")
    for hid, info in status["handlers"].items():
        print(
            f"  handler {hid}: {info['type']} "
            f"level={level_name(info['level'])} bubble={info['bubble']} "
            f"processors={info['processors']}"
        )
    for lid, info in status["loggers"].items():
        print(
            f"  logger {lid}: handlers={info['handlers']} "
            f"processors={info['processors']}"
        )
    return 0


def main() -> None:
    sys.exit(run_cli())
