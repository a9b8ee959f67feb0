"""
toplangs/cli.py — Command-line interface for the language card.

Provides a single entry point that:
  1. Loads PAT_1 / GITHUB_TOKEN from a .env file automatically
  2. Fetches and aggregates a user's repository languages
  3. Renders the SVG card, or prints the language table

Usage:
    toplangs render octocat --layout donut -o card.svg
    toplangs render octocat --hide html,css --langs-count 8
    toplangs stats octocat --count-weight 0.5

All commands read the token from .env in the working directory or any parent
(or the path given by --env-file) before falling back to the environment.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from toplangs.viz.primitives import parse_array


# ── .env loader (stdlib only, no python-dotenv) ───────────────────────────────

def _find_dotenv(start: Path) -> Path | None:
    """Nearest .env in ``start`` or one of its parents."""
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _parse_dotenv_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, _, value = (part.strip() for part in line.partition("="))
    if value[:1] in ('"', "'") and len(value) >= 2 and value[-1] == value[0]:
        value = value[1:-1]
    return (key, value) if key else None


def _load_dotenv(env_file: str | None = None) -> dict[str, str]:
    """Export PAT_1 / GITHUB_TOKEN (and any other KEY=VALUE) from a .env file.

    Variables already present in the environment win. Returns only the
    variables this call added.

    Args:
        env_file: Explicit path. If None, the nearest .env in the working
                  directory or one of its parents is used.
    """
    path = Path(env_file) if env_file else _find_dotenv(Path.cwd())
    if path is None or not path.is_file():
        return {}

    loaded: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        pair = _parse_dotenv_line(raw_line)
        if pair is None or pair[0] in os.environ:
            continue
        os.environ[pair[0]] = pair[1]
        loaded[pair[0]] = pair[1]
    return loaded


# ── Logging setup ─────────────────────────────────────────────────────────────

def _setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with timestamps on stderr."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    fmt = "%(asctime)s  %(levelname)-8s  %(name)s — %(message)s"
    datefmt = "%H:%M:%S"
    logging.basicConfig(level=numeric, format=fmt, datefmt=datefmt, stream=sys.stderr)
    # matplotlib's font manager is chatty at DEBUG
    logging.getLogger("matplotlib").setLevel(logging.WARNING)


logger = logging.getLogger("toplangs.cli")


def _resolve_cli_token(args: argparse.Namespace) -> str | None:
    from toplangs.pipeline import resolve_token

    token = args.token or resolve_token()
    if not token:
        logger.warning("No GitHub token found. Set PAT_1 or GITHUB_TOKEN in .env or pass --token.")
    return token


# ── Subcommand: render ────────────────────────────────────────────────────────

def cmd_render(args: argparse.Namespace) -> int:
    """Fetch, aggregate and render the card; write it to --output or stdout."""
    _load_dotenv(args.env_file)
    _setup_logging(args.log_level)

    from toplangs.pipeline import build_top_languages_card
    from toplangs.viz.top_languages import TopLangsOptions

    options = TopLangsOptions(
        hide=parse_array(args.hide),
        hide_title=args.hide_title,
        hide_border=args.hide_border,
        card_width=args.card_width,
        title_color=args.title_color,
        text_color=args.text_color,
        bg_color=args.bg_color,
        border_color=args.border_color,
        theme=args.theme,
        layout=args.layout,
        locale=args.locale.lower() if args.locale else None,
        langs_count=args.langs_count,
        border_radius=args.border_radius,
        disable_animations=args.disable_animations,
        hide_progress=args.hide_progress,
        stats_format=args.stats_format,
        custom_title=args.custom_title,
    )

    result = build_top_languages_card(
        args.username,
        options,
        exclude_repo=parse_array(args.exclude_repo),
        size_weight=args.size_weight,
        count_weight=args.count_weight,
        token=_resolve_cli_token(args),
    )

    if args.output:
        Path(args.output).write_text(result.svg, encoding="utf-8")
        logger.info("Card written to %s", args.output)
    else:
        sys.stdout.write(result.svg)

    if result.error is not None:
        logger.error("Rendered an error card: %s", result.error)
        return 1
    return 0


# ── Subcommand: stats ─────────────────────────────────────────────────────────

def cmd_stats(args: argparse.Namespace) -> int:
    """Print the weighted language table without rendering."""
    _load_dotenv(args.env_file)
    _setup_logging(args.log_level)

    from toplangs.errors import TopLangsError
    from toplangs.metrics.languages import fetch_top_languages, table_to_frame

    try:
        table = fetch_top_languages(
            args.username,
            exclude_repo=parse_array(args.exclude_repo),
            size_weight=args.size_weight,
            count_weight=args.count_weight,
            token=_resolve_cli_token(args),
        )
    except TopLangsError as exc:
        logger.error("%s", exc)
        return 1

    if not table:
        print("No languages data.")
        return 0

    print(table_to_frame(table).to_string(index=False))
    return 0


# ── Argument parser ───────────────────────────────────────────────────────────

def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("username", metavar="USERNAME", help="GitHub login")
    parser.add_argument("--token", default=None, help="GitHub token (overrides .env)")
    parser.add_argument("--env-file", default=None, metavar="PATH", help="Path to .env file")
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument(
        "--exclude-repo", default=None, metavar="A,B",
        help="Comma-separated repository names to ignore",
    )
    parser.add_argument("--size-weight", default="1", help="Exponent applied to byte size")
    parser.add_argument("--count-weight", default="0", help="Exponent applied to repo count")


def build_parser() -> argparse.ArgumentParser:
    from toplangs.viz.top_languages import LAYOUTS

    parser = argparse.ArgumentParser(
        prog="toplangs",
        description="Most-used-languages SVG cards for GitHub profiles.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # render
    p_render = subparsers.add_parser("render", help="Render the SVG language card")
    _add_common_arguments(p_render)
    p_render.add_argument("-o", "--output", default=None, metavar="FILE",
                          help="Write the SVG here instead of stdout")
    p_render.add_argument("--layout", default=None, choices=list(LAYOUTS))
    p_render.add_argument("--langs-count", default=None, type=int)
    p_render.add_argument("--hide", default=None, metavar="A,B",
                          help="Comma-separated languages to hide")
    p_render.add_argument("--card-width", default=None, type=int)
    p_render.add_argument("--theme", default=None)
    p_render.add_argument("--title-color", default=None)
    p_render.add_argument("--text-color", default=None)
    p_render.add_argument("--bg-color", default=None)
    p_render.add_argument("--border-color", default=None)
    p_render.add_argument("--border-radius", default=None)
    p_render.add_argument("--locale", default=None)
    p_render.add_argument("--custom-title", default=None)
    p_render.add_argument("--stats-format", default="percentages",
                          choices=["percentages", "bytes"])
    p_render.add_argument("--hide-title", action="store_true")
    p_render.add_argument("--hide-border", action="store_true")
    p_render.add_argument("--hide-progress", action="store_true")
    p_render.add_argument("--disable-animations", action="store_true")
    p_render.set_defaults(func=cmd_render)

    # stats
    p_stats = subparsers.add_parser("stats", help="Print the weighted language table")
    _add_common_arguments(p_stats)
    p_stats.set_defaults(func=cmd_stats)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
