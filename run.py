"""Roomcrawl CLI entry point.

Provides subcommands for running the Socket.IO game server and for
generating a single level offline (handy for inspecting seeds). Accepts
configuration via flags and environment variables, with optional .env
loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()

# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()

__version__ = "0.1.0"


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Roomcrawl Level Server

    Run the real-time Flask-SocketIO game server, or generate a single level
    and print a summary. Configuration can be provided via CLI flags or
    environment variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                            Bind address for the web server (default: 0.0.0.0)
          PORT                            Port for the web server (default: 5000)
          ROOMCRAWL_SEED                  Base seed for level generation (default: wall clock)
          ROOMCRAWL_GENERATION_ATTEMPTS   Attempt budget for a new level (default: 1000)
          ROOMCRAWL_FORCED_ATTEMPTS       Attempt budget after completing a level (default: 10000)
          ROOMCRAWL_LOG_LEVEL             debug | info | warn | error (default: info)
          ROOMCRAWL_LOG_JSON              Emit JSON log lines when set to 1

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Generate depth 2 with a fixed seed and dump it as JSON
          python run.py generate --depth 2 --seed 1234 --json
        """
    )

    parser = argparse.ArgumentParser(
        prog="Roomcrawl",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Roomcrawl {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the Socket.IO game server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the real-time Flask/Socket.IO server with the level loop",
    )
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode with verbose error pages")
    server_parser.set_defaults(command="server")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one level and print a summary",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    gen_parser.add_argument("--depth", type=int, default=0, help="Level depth (selects the generation config)")
    gen_parser.add_argument("--seed", type=int, default=None, help="Base seed (attempt k uses seed + k)")
    gen_parser.add_argument("--attempts", type=int, default=None, help="Attempt budget override")
    gen_parser.add_argument("--json", dest="as_json", action="store_true", help="Print the full level as JSON")
    gen_parser.set_defaults(command="generate")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    return parser.parse_args(argv)


def _banner(mode: str, rows: list[tuple[str, object]]) -> str:
    title = (
        f"{Fore.CYAN}{Style.BRIGHT}Roomcrawl {mode}{Style.RESET_ALL}" if _COLOR_ENABLED else f"Roomcrawl {mode}"
    )

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [divider, f"  {title}", divider]
    lines.extend(f"  {label(k + ':'):12} {value(v)}" for k, v in rows)
    lines.extend([divider, ""])
    return "\n".join(lines)


def run_generate(args) -> int:
    from roomcrawl.items.catalog import default_catalog
    from roomcrawl.level import GeneratorSettings, LevelGenerationError, LevelGenerator

    generator = LevelGenerator(default_catalog(), settings=GeneratorSettings())
    try:
        level = generator.generate(args.depth, attempts=args.attempts, seed=args.seed)
    except LevelGenerationError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    if args.as_json:
        payload = level.to_dict()
        payload["metrics"] = level.metrics
        print(json.dumps(payload, indent=2))
        return 0
    print(
        _banner(
            "Level",
            [
                ("Depth", level.depth),
                ("Seed", level.seed),
                ("Attempts", level.attempts),
                ("Rooms", len(level.graph)),
                ("Edges", level.graph.edge_count()),
                ("Keys", ", ".join(d.name for d in level.key_definitions)),
            ],
        )
    )
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "generate":
        return run_generate(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))

    # Import server entrypoints only after environment is ready
    from roomcrawl.logging_utils import log
    from roomcrawl.server import start_server

    print(_banner("Server", [("Mode", mode.upper()), ("Host", host), ("Port", port), ("WebSockets", "enabled")]))
    log.info(event="startup", mode=mode, host=host, port=port)
    start_server(host=host, port=port, debug=getattr(args, "debug", False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
