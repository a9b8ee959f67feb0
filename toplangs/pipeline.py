"""
toplangs/pipeline.py — Single-call request orchestrator.

Provides build_top_languages_card() which runs one card request end to end:

    locale check → fetch + aggregate → render → cache lifetime

Aggregation failures never escape: they are rendered as an error card with
the same colour options as the requested card, and cached for a shorter time.

Usage:
    from toplangs.pipeline import build_top_languages_card, resolve_token
    result = build_top_languages_card("octocat", TopLangsOptions(layout="donut"),
                                      token=resolve_token())
    print(result.svg)
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional

from toplangs.config import DEFAULT_CONFIG, ONE_DAY, TopLangsConfig
from toplangs.errors import TopLangsError
from toplangs.ingestion.github_graphql_client import GitHubGraphQLClient
from toplangs.metrics.languages import fetch_top_languages
from toplangs.viz.card import render_error
from toplangs.viz.i18n import is_locale_available
from toplangs.viz.top_languages import TopLangsOptions, render_top_languages

logger = logging.getLogger(__name__)


@dataclass
class CardResult:
    """
    Output of a single card request.

    Fields:
        svg:           The rendered card (or error card).
        cache_seconds: Lifetime for the Cache-Control header.
        error:         Error message when an error card was rendered.
    """
    svg: str
    cache_seconds: int
    error: Optional[str] = None

    @property
    def cache_control(self) -> str:
        if self.error is not None:
            return (
                f"max-age={self.cache_seconds}, s-maxage={self.cache_seconds}, "
                f"stale-while-revalidate={self.cache_seconds}"
            )
        return (
            f"max-age={self.cache_seconds}, s-maxage={self.cache_seconds}, "
            f"stale-while-revalidate={ONE_DAY}"
        )


def resolve_token(
    env: Optional[Mapping[str, str]] = None,
    config: TopLangsConfig = DEFAULT_CONFIG,
) -> Optional[str]:
    """First non-empty credential among config.token_env_vars."""
    env = os.environ if env is None else env
    for name in config.token_env_vars:
        value = env.get(name)
        if value:
            return value
    return None


def resolve_cache_seconds(
    requested: Any,
    config: TopLangsConfig = DEFAULT_CONFIG,
) -> int:
    """Requested cache lifetime clamped to the configured bounds.

    Missing or unparsable values use the default lifetime.
    """
    try:
        seconds = int(requested)
    except (TypeError, ValueError):
        return config.cache_seconds_default
    return max(config.cache_seconds_min, min(seconds, config.cache_seconds_max))


def _error_card(message: str, secondary: str, options: TopLangsOptions) -> str:
    return render_error(
        message,
        secondary,
        title_color=options.title_color,
        text_color=options.text_color,
        bg_color=options.bg_color,
        border_color=options.border_color,
        theme=options.theme,
    )


def build_top_languages_card(
    username: str,
    options: Optional[TopLangsOptions] = None,
    exclude_repo: Optional[Iterable[str]] = None,
    size_weight: Any = None,
    count_weight: Any = None,
    cache_seconds: Any = None,
    token: Optional[str] = None,
    client: Optional[GitHubGraphQLClient] = None,
    config: TopLangsConfig = DEFAULT_CONFIG,
    sleep: Callable[[float], None] = time.sleep,
) -> CardResult:
    """
    Fetch, aggregate and render the language card for ``username``.

    Args:
        username:      GitHub login.
        options:       Rendering options (layout, colours, hidden languages…).
        exclude_repo:  Repository names to leave out of the aggregation.
        size_weight:   Raw size exponent (string or number); sanitized.
        count_weight:  Raw count exponent (string or number); sanitized.
        cache_seconds: Requested cache lifetime; clamped.
        token:         GitHub credential (see resolve_token()).
        client:        Optional transport override.
        config:        Retry budget, defaults and cache bounds.
        sleep:         Backoff sleep function.

    Returns:
        CardResult. On failure ``error`` is set and ``svg`` holds an error
        card; nothing is raised.
    """
    options = options or TopLangsOptions()

    if options.locale and not is_locale_available(options.locale):
        logger.warning("Unknown locale requested: %s", options.locale)
        return CardResult(
            svg=_error_card("Locale not found", "", options),
            cache_seconds=config.error_cache_seconds,
            error="Locale not found",
        )

    try:
        top_langs = fetch_top_languages(
            username,
            exclude_repo=exclude_repo,
            size_weight=size_weight if size_weight is not None else config.default_size_weight,
            count_weight=count_weight if count_weight is not None else config.default_count_weight,
            token=token,
            client=client,
            config=config,
            sleep=sleep,
        )
    except TopLangsError as exc:
        logger.error("Top languages fetch failed for %r: %s", username, exc)
        return CardResult(
            svg=_error_card(str(exc), exc.secondary_message, options),
            cache_seconds=config.error_cache_seconds,
            error=str(exc),
        )

    return CardResult(
        svg=render_top_languages(top_langs, options, config),
        cache_seconds=resolve_cache_seconds(cache_seconds, config),
    )
