"""
toplangs/viz/top_languages.py — Render entry point for the language card.

render_top_languages() turns a LanguageTable into a complete SVG card:

    1. Pick the number of languages to show: options.langs_count, or the
       layout default (get_default_languages_count).
    2. trim_top_languages(): sort by percent, drop hidden languages, cap
       the count to [1, 20].
    3. Dispatch to one layout renderer (toplangs.viz.layouts), or to the
       "no data" placeholder when nothing is left.
    4. Wrap the layout in the card frame (toplangs.viz.card.Card).

Percentages shown on the card are the ones computed over the full, untrimmed
table; they are not renormalized over the visible subset.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from toplangs.config import DEFAULT_CONFIG, TopLangsConfig
from toplangs.metrics.languages import LanguageStat, LanguageTable
from toplangs.viz import layouts
from toplangs.viz.card import Card
from toplangs.viz.i18n import I18n
from toplangs.viz.primitives import clamp_value, lowercase_trim
from toplangs.viz.themes import get_card_colors

logger = logging.getLogger(__name__)

LAYOUT_NORMAL = "normal"
LAYOUT_COMPACT = "compact"
LAYOUT_DONUT = "donut"
LAYOUT_DONUT_VERTICAL = "donut-vertical"
LAYOUT_PIE = "pie"
LAYOUTS = (LAYOUT_NORMAL, LAYOUT_COMPACT, LAYOUT_DONUT, LAYOUT_DONUT_VERTICAL, LAYOUT_PIE)

CARD_CSS = """
    @keyframes slideInAnimation {{
      from {{ width: 0; }}
      to {{ width: calc(100%-100px); }}
    }}
    @keyframes growWidthAnimation {{
      from {{ width: 0; }}
      to {{ width: 100%; }}
    }}
    .stat {{
      font: 600 14px 'Segoe UI', Ubuntu, "Helvetica Neue", Sans-Serif; fill: {text_color};
    }}
    @supports(-moz-appearance: auto) {{
      .stat {{ font-size:12px; }}
    }}
    .bold {{ font-weight: 700 }}
    .lang-name {{
      font: 400 11px "Segoe UI", Ubuntu, Sans-Serif;
      fill: {text_color};
    }}
    .stagger {{
      opacity: 0;
      animation: fadeInAnimation 0.3s ease-in-out forwards;
    }}
    #rect-mask rect {{
      animation: slideInAnimation 1s ease-in-out forwards;
    }}
    .lang-progress {{
      animation: growWidthAnimation 0.6s ease-in-out forwards;
    }}
"""


@dataclass
class TopLangsOptions:
    """
    Rendering options for the language card.

    Every field is optional; omitted fields take the documented defaults.
    ``langs_count`` defaults per layout (see get_default_languages_count),
    ``card_width`` defaults to 300 and is raised to at least 280.
    """
    hide: list[str] = field(default_factory=list)
    hide_title: bool = False
    hide_border: bool = False
    card_width: Optional[Any] = None
    title_color: Optional[str] = None
    text_color: Optional[str] = None
    bg_color: Optional[str] = None
    border_color: Optional[str] = None
    theme: Optional[str] = None
    layout: Optional[str] = None
    locale: Optional[str] = None
    langs_count: Optional[Any] = None
    border_radius: Optional[Any] = None
    disable_animations: bool = False
    hide_progress: bool = False
    stats_format: str = layouts.STATS_FORMAT_PERCENTAGES
    custom_title: Optional[str] = None


def get_default_languages_count(
    layout: Optional[str] = None,
    hide_progress: bool = False,
    config: TopLangsConfig = DEFAULT_CONFIG,
) -> int:
    """Number of languages shown when the caller does not ask for a count."""
    if layout == LAYOUT_COMPACT or hide_progress is True:
        return config.compact_layout_default_langs_count
    if layout == LAYOUT_DONUT:
        return config.donut_layout_default_langs_count
    if layout == LAYOUT_DONUT_VERTICAL:
        return config.donut_vertical_layout_default_langs_count
    if layout == LAYOUT_PIE:
        return config.pie_layout_default_langs_count
    return config.normal_layout_default_langs_count


def trim_top_languages(
    top_langs: LanguageTable,
    langs_count: int,
    hide: Optional[Iterable[str]] = None,
    config: TopLangsConfig = DEFAULT_CONFIG,
) -> list[LanguageStat]:
    """
    Select the languages to display.

    Args:
        top_langs:   Table from the aggregator; not modified.
        langs_count: Requested number of languages, clamped to [1, 20].
        hide:        Language names to drop, compared case-insensitively
                     after trimming whitespace.

    Returns:
        At most the clamped count of languages, by descending percent. Ties
        keep the table order. Fewer are returned when fewer remain.
    """
    count = int(clamp_value(langs_count, 1, config.maximum_langs_count))
    langs_to_hide = {lowercase_trim(name) for name in (hide or [])}

    ranked = sorted(top_langs.values(), key=lambda lang: lang.percent or 0, reverse=True)
    visible = [lang for lang in ranked if lowercase_trim(lang.name) not in langs_to_hide]
    return visible[:count]


def resolve_card_width(card_width: Any, config: TopLangsConfig = DEFAULT_CONFIG) -> int:
    """Card width from the request: default when missing or invalid, never
    below the minimum."""
    if card_width in (None, ""):
        return config.default_card_width
    try:
        value = float(card_width)
    except (TypeError, ValueError):
        return config.default_card_width
    if not math.isfinite(value):
        return config.default_card_width
    width = int(value)
    if width <= 0:
        return config.default_card_width
    return max(width, config.min_card_width)


def resolve_langs_count(
    langs_count: Any,
    layout: Optional[str],
    hide_progress: bool,
    config: TopLangsConfig = DEFAULT_CONFIG,
) -> int:
    """Requested count as int, or the layout default when absent/invalid."""
    if langs_count not in (None, ""):
        try:
            return int(langs_count)
        except (TypeError, ValueError):
            logger.debug("Ignoring invalid langs_count %r", langs_count)
    return get_default_languages_count(layout, hide_progress, config)


def _resolve_border_radius(border_radius: Any) -> float:
    try:
        radius = float(border_radius)
    except (TypeError, ValueError):
        return 4.5
    return radius if math.isfinite(radius) else 4.5


def render_layout(
    langs: list[LanguageStat],
    layout: Optional[str],
    width: int,
    hide_progress: bool = False,
    stats_format: str = layouts.STATS_FORMAT_PERCENTAGES,
    animations: bool = True,
) -> layouts.LayoutResult:
    """Dispatch non-empty ``langs`` to the renderer for ``layout``.

    Pie and donut-vertical take precedence over hide_progress; otherwise
    hide_progress selects the compact layout.
    """
    if layout == LAYOUT_PIE:
        return layouts.render_pie_layout(langs, stats_format, animations)
    if layout == LAYOUT_DONUT_VERTICAL:
        return layouts.render_donut_vertical_layout(langs, stats_format, animations)
    if layout == LAYOUT_COMPACT or hide_progress:
        return layouts.render_compact_layout(langs, width, hide_progress, stats_format, animations)
    if layout == LAYOUT_DONUT:
        return layouts.render_donut_layout(langs, width, stats_format, animations)
    return layouts.render_normal_layout(langs, width, stats_format, animations)


def render_top_languages(
    top_langs: LanguageTable,
    options: Optional[TopLangsOptions] = None,
    config: TopLangsConfig = DEFAULT_CONFIG,
) -> str:
    """Render the complete language card as an SVG string.

    Never raises on empty or degenerate tables: an empty selection renders
    the localized "no data" text at the compact base height.
    """
    options = options or TopLangsOptions()
    layout = options.layout
    hide_progress = bool(options.hide_progress)
    animations = not options.disable_animations

    i18n = I18n(locale=options.locale)
    langs_count = resolve_langs_count(options.langs_count, layout, hide_progress, config)
    langs = trim_top_languages(top_langs, langs_count, options.hide, config)
    width = resolve_card_width(options.card_width, config)

    colors = get_card_colors(
        title_color=options.title_color,
        text_color=options.text_color,
        bg_color=options.bg_color,
        border_color=options.border_color,
        theme=options.theme,
    )

    if not langs:
        result = layouts.render_no_languages(
            i18n.t("langcard.nodata"), colors.text_color, layout
        )
    else:
        result = render_layout(
            langs, layout, width, hide_progress, options.stats_format, animations
        )

    logger.debug(
        "Rendering %s layout: %d languages, %sx%s",
        layout or LAYOUT_NORMAL, len(langs), result.width or width, result.height,
    )

    card = Card(
        width=result.width or width,
        height=result.height,
        colors=colors,
        custom_title=options.custom_title,
        default_title=i18n.t("langcard.title"),
        border_radius=_resolve_border_radius(options.border_radius),
    )
    if not animations:
        card.disable_animations()
    card.set_hide_border(options.hide_border)
    card.set_hide_title(options.hide_title)
    card.set_css(CARD_CSS.format(text_color=colors.text_color))

    if layout in (LAYOUT_PIE, LAYOUT_DONUT_VERTICAL):
        return card.render(result.markup)

    return card.render(
        f"""
    <svg data-testid="lang-items" x="{config.card_padding}">
      {result.markup}
    </svg>
    """
    )
