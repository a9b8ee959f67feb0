"""
toplangs/metrics/languages.py — Weighted language usage across repositories.

A user's repositories each report up to 10 languages with a byte size. This
module folds those edges into one row per language and ranks the languages
by a weighted size:

    weighted_size = f(size, size_weight) × g(count, count_weight)

    f(b, w) = g(b, w) = 1            if w == 0
                      = 1 ** w       if b == 0   (zero base treated as 1)
                      = b ** w       otherwise

where ``size`` is the summed byte size and ``count`` the number of
repositories that contain the language. With the defaults (size_weight=1,
count_weight=0) the ranking is plain byte size; count_weight > 0 rewards
languages used in many repositories.

Percentages are weighted_size / total × 100, rounded half-up to 2 decimals.
Every derived numeric field is checked once for finiteness right after
normalization; NaN and ±inf become 0 instead of raising.
"""

import logging
import math
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Iterable, Optional

import numpy as np
import pandas as pd

from toplangs.config import DEFAULT_CONFIG, TopLangsConfig
from toplangs.errors import MissingCredentialError, MissingParameterError
from toplangs.ingestion.github_graphql_client import GitHubGraphQLClient
from toplangs.ingestion.retry import retry_with_backoff

logger = logging.getLogger(__name__)


@dataclass
class LanguageStat:
    """
    Usage statistics for one language.

    Fields:
        name:    Language name as reported by GitHub; unique within a table.
        color:   Display colour (hex); the neutral gray when GitHub has none.
        size:    Weighted size. Equals the raw byte sum when size_weight=1
                 and count_weight=0.
        count:   Number of repositories in which the language appears.
        percent: Share of the total weighted size, 0–100, 2 decimals.
    """
    name: str
    color: str
    size: float
    count: int
    percent: float = 0.0


# Insertion-ordered: descending weighted size, ties in first-seen order.
LanguageTable = dict[str, LanguageStat]


def sanitize_weight(value: Any, default: float) -> float:
    """Parse a weight, falling back to ``default`` when unusable.

    Unparsable values, NaN and negative numbers are unusable.

    >>> sanitize_weight("2", 1.0)
    2.0
    >>> sanitize_weight("abc", 1.0)
    1.0
    >>> sanitize_weight(-1, 0.0)
    0.0
    """
    try:
        weight = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(weight) or weight < 0:
        return default
    return weight


def weight_factor(base: np.ndarray, weight: float) -> np.ndarray:
    """Raise ``base`` to ``weight`` with the zero-weight and zero-base rules.

    A weight of exactly 0 yields exactly 1 for every base, so 0 ** 0 never
    has to be decided. A base of 0 is replaced by 1 before exponentiation.
    Overflow produces inf, which the caller's finiteness pass zeroes.
    """
    base = np.asarray(base, dtype=float)
    if weight == 0:
        return np.ones_like(base)
    safe_base = np.where(base == 0, 1.0, base)
    with np.errstate(over="ignore", invalid="ignore"):
        return np.power(safe_base, weight)


def _round_half_up(values: np.ndarray, decimals: int = 2) -> np.ndarray:
    scale = 10 ** decimals
    with np.errstate(over="ignore", invalid="ignore"):
        return np.floor(values * scale + 0.5) / scale


def _finite_or_zero(values: np.ndarray) -> np.ndarray:
    return np.where(np.isfinite(values) & (values > 0), values, 0.0)


def accumulate_languages(
    repo_nodes: Iterable[dict],
    default_color: str = DEFAULT_CONFIG.default_lang_color,
) -> pd.DataFrame:
    """
    Fold repository language edges into one row per language.

    Args:
        repo_nodes:    Repository dicts as returned by
                       GitHubGraphQLClient.fetch_repository_languages().
        default_color: Colour used when an edge carries none.

    Returns:
        DataFrame with columns name, color, size, count. Rows are in the
        order each language was first encountered; ``color`` comes from that
        first occurrence; a missing edge size counts as 0. Empty DataFrame
        (same columns) when no repository carries language data.
    """
    records = []
    for repo in repo_nodes:
        edges = ((repo or {}).get("languages") or {}).get("edges") or []
        for edge in edges:
            node = (edge or {}).get("node") or {}
            name = node.get("name")
            if not name:
                continue
            records.append(
                {
                    "name": name,
                    "color": node.get("color") or default_color,
                    "size": edge.get("size") or 0,
                }
            )

    if not records:
        return pd.DataFrame(columns=["name", "color", "size", "count"])

    df = pd.DataFrame.from_records(records)
    # sort=False keeps groups in order of first observation.
    grouped = df.groupby("name", sort=False).agg(
        color=("color", "first"),
        size=("size", "sum"),
        count=("size", "size"),
    )
    return grouped.reset_index()


def compute_language_table(
    repo_nodes: Iterable[dict],
    exclude_repo: Optional[Iterable[str]] = None,
    size_weight: Any = DEFAULT_CONFIG.default_size_weight,
    count_weight: Any = DEFAULT_CONFIG.default_count_weight,
    config: TopLangsConfig = DEFAULT_CONFIG,
) -> LanguageTable:
    """
    Build the ordered language table from already-fetched repositories.

    Algorithm:
        1. Sanitize both weights (fallback 1 for size, 0 for count).
        2. Drop repositories named in exclude_repo or
           config.excluded_repositories.
        3. Accumulate size and count per language.
        4. weighted = weight_factor(size) × weight_factor(count).
        5. percent = round_half_up(weighted / total × 100, 2), with a
           non-positive total replaced by 1.
        6. Zero every non-finite size/percent.
        7. Stable sort by weighted size, descending.

    Returns:
        LanguageTable. Empty when no repository remains or none carries
        language data.
    """
    size_w = sanitize_weight(size_weight, config.default_size_weight)
    count_w = sanitize_weight(count_weight, config.default_count_weight)

    excluded = set(config.excluded_repositories) | set(exclude_repo or ())
    repos = [repo for repo in repo_nodes if repo.get("name") not in excluded]
    if not repos:
        logger.debug("compute_language_table: no repositories left after exclusion.")
        return {}

    df = accumulate_languages(repos, config.default_lang_color)
    if df.empty:
        logger.debug("compute_language_table: repositories carry no language data.")
        return {}

    size_factor = weight_factor(df["size"].to_numpy(dtype=float), size_w)
    count_factor = weight_factor(df["count"].to_numpy(dtype=float), count_w)

    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        weighted = size_factor * count_factor
        total = float(weighted.sum())
        if not total > 0:
            total = 1.0
        percent = _round_half_up(weighted / total * 100)

    df["size"] = _finite_or_zero(weighted)
    df["percent"] = _finite_or_zero(percent)
    df = df.sort_values("size", ascending=False, kind="stable")

    table: LanguageTable = {}
    for row in df.to_dict("records"):
        table[row["name"]] = LanguageStat(
            name=row["name"],
            color=row["color"],
            size=float(row["size"]),
            count=int(row["count"]),
            percent=float(row["percent"]),
        )

    logger.debug(
        "Language table computed: %d languages from %d repositories "
        "(size_weight=%s, count_weight=%s).",
        len(table), len(repos), size_w, count_w,
    )
    return table


def fetch_top_languages(
    username: str,
    exclude_repo: Optional[Iterable[str]] = None,
    size_weight: Any = DEFAULT_CONFIG.default_size_weight,
    count_weight: Any = DEFAULT_CONFIG.default_count_weight,
    token: Optional[str] = None,
    client: Optional[GitHubGraphQLClient] = None,
    config: TopLangsConfig = DEFAULT_CONFIG,
    sleep: Callable[[float], None] = time.sleep,
) -> LanguageTable:
    """
    Fetch a user's repositories from GitHub and compute the language table.

    Args:
        username:     GitHub login.
        exclude_repo: Repository names to ignore.
        size_weight:  Exponent applied to the byte size (string or number).
        count_weight: Exponent applied to the repository count.
        token:        GitHub access token. Required.
        client:       Transport to use; built from ``token`` when None.
        config:       Retry budget, exclusions and colour defaults.
        sleep:        Backoff sleep function (injectable for tests).

    Raises:
        MissingParameterError:  ``username`` is empty.
        MissingCredentialError: ``token`` is empty.
        UpstreamError:          Structured GraphQL error (no retry), or every
                                attempt failed at the transport level.
    """
    if not username:
        raise MissingParameterError(["username"])
    if not token:
        raise MissingCredentialError()

    if client is None:
        client = GitHubGraphQLClient(token, config=config)

    repo_nodes = retry_with_backoff(
        lambda: client.fetch_repository_languages(username),
        retries=config.fetch_retries,
        initial_delay=config.retry_initial_delay_s,
        sleep=sleep,
    )

    table = compute_language_table(
        repo_nodes,
        exclude_repo=exclude_repo,
        size_weight=size_weight,
        count_weight=count_weight,
        config=config,
    )
    logger.info("Fetched %d languages for %s.", len(table), username)
    return table


def table_to_frame(table: LanguageTable) -> pd.DataFrame:
    """Tabular view of a LanguageTable (one row per language, table order)."""
    return pd.DataFrame(
        [asdict(stat) for stat in table.values()],
        columns=["name", "color", "size", "count", "percent"],
    )
