"""
Command line entry point shared by both servers.

    mcp-greeting server --config config.yml
    mcp-wolfram-alpha s -c /etc/wolfram.yml
"""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from typing import Callable, List, Optional

from tool_servers import __revision__, __version__
from tool_servers.config import DEFAULT_CONFIG_PATH, Config, load_config
from tool_servers.errors import ConfigurationError
from tool_servers.logger import logging_session

RunFunc = Callable[[Config, logging.Logger, str], None]


def server_version(version: str = __version__, revision: str = __revision__) -> str:
    if revision and revision != "xxx":
        return f"{version} ({revision})"
    return version


def cmd_server(a: argparse.Namespace, run: RunFunc) -> None:
    try:
        cfg = load_config(a.config)
    except ConfigurationError as e:
        raise ConfigurationError(f"failed to load configuration file: {e}") from e

    with ExitStack() as stack:
        try:
            logger = stack.enter_context(logging_session(cfg.debug, cfg.log))
        except OSError as e:
            raise ConfigurationError(f"failed to initialize logger: {e}") from e
        run(cfg, logger, server_version())


def build_parser(name: str, usage: str, run: RunFunc) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog=name, description=usage)
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__} ({__revision__})")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("server", aliases=["s"], help=usage)
    p.add_argument("-c", "--config", default=DEFAULT_CONFIG_PATH, help="path to the configuration file")
    p.set_defaults(func=lambda a: cmd_server(a, run))
    return ap


def run_cli(name: str, usage: str, run: RunFunc, argv: Optional[List[str]] = None) -> int:
    args = build_parser(name, usage, run).parse_args(argv)
    try:
        args.func(args)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
