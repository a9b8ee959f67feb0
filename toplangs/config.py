"""
toplangs/config.py — All tunable parameters for the top-languages card.

Layout constants, retry budget, card dimensions and cache lifetimes live here
so that a calibration change is a single-file diff. Geometry constants that
define the shape of a layout (radii, paddings inside a layout) stay next to
the renderer that draws them.
"""

from dataclasses import dataclass


ONE_MINUTE = 60
ONE_HOUR = 60 * ONE_MINUTE
ONE_DAY = 24 * ONE_HOUR


@dataclass(frozen=True)
class TopLangsConfig:
    """
    Immutable configuration for fetching and rendering the language card.

    Override by constructing a new TopLangsConfig with the desired values.
    """

    # ── Remote fetch ──────────────────────────────────────────────────────────
    graphql_endpoint: str = "https://api.github.com/graphql"

    request_timeout_s: float = 30.0
    # Socket timeout for a single GraphQL request.

    fetch_retries: int = 3
    # Retries after the first attempt, so 4 attempts in total.

    retry_initial_delay_s: float = 0.5
    # Delay before the first retry; doubles after every failed attempt
    # (0.5s, 1s, 2s).

    token_env_vars: tuple[str, ...] = ("PAT_1", "GITHUB_TOKEN")
    # Environment variables searched, in order, for the GitHub credential.

    excluded_repositories: tuple[str, ...] = ()
    # Repository names always dropped before aggregation, merged with the
    # caller's exclude_repo list.

    # ── Aggregation ───────────────────────────────────────────────────────────
    default_size_weight: float = 1.0
    default_count_weight: float = 0.0
    # Fallbacks when a weight is unparsable, NaN or negative.

    default_lang_color: str = "#858585"
    # Used when GitHub reports no colour for a language.

    # ── Card dimensions ───────────────────────────────────────────────────────
    default_card_width: int = 300
    min_card_width: int = 280
    card_padding: int = 25
    compact_layout_base_height: int = 90
    # Also the forced height of the "no data" card.

    maximum_langs_count: int = 20

    # ── Default language counts per layout ────────────────────────────────────
    normal_layout_default_langs_count: int = 5
    compact_layout_default_langs_count: int = 6
    donut_layout_default_langs_count: int = 5
    donut_vertical_layout_default_langs_count: int = 6
    pie_layout_default_langs_count: int = 6

    # ── HTTP cache lifetimes (seconds) ────────────────────────────────────────
    cache_seconds_default: int = 6 * ONE_DAY
    cache_seconds_min: int = 2 * ONE_DAY
    cache_seconds_max: int = 10 * ONE_DAY
    error_cache_seconds: int = 10 * ONE_MINUTE


# Shared default instance; build a new TopLangsConfig to override.
DEFAULT_CONFIG = TopLangsConfig()
