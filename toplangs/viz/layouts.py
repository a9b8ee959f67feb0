"""
toplangs/viz/layouts.py — Geometry and markup for the five card layouts.

Each renderer takes the trimmed, ordered language list and returns a
LayoutResult: the body markup plus the canvas height the card must use
(the donut layout also widens the canvas).

Layouts:
    normal          — one row per language: name, progress bar, value.
                      height = 45 + (n + 1) × 40
    compact         — one stacked strip + two-column legend.
                      height = 90 + round(n / 2) × 25   (−25 without strip)
    donut           — ring of arc paths beside a one-column legend.
                      height = 215 + max(n − 5, 0) × 32, width += 50
    donut-vertical  — ring of dashed circles above a two-column legend.
                      height = 300 + round(n / 2) × 25
    pie             — filled wedges above a two-column legend.
                      height = 300 + round(n / 2) × 25

The geometry of the circular layouts and of the compact strip is computed
by pure helpers (donut_segments, pie_wedges, donut_vertical_segments,
compact_spans) so it can be inspected without parsing SVG. The entrance
stagger delay is only an annotation on those records: with animations
disabled it is None and no stagger attributes are emitted.

round(n / 2) rounds half up, i.e. (n + 1) // 2.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from toplangs.config import DEFAULT_CONFIG
from toplangs.metrics.languages import LanguageStat
from toplangs.viz.geometry import Point, circle_length, polar_to_cartesian
from toplangs.viz.primitives import (
    chunk_array,
    create_progress_node,
    escape_xml,
    flex_layout,
    format_bytes,
    format_number,
    measure_text,
)


DEFAULT_LANG_COLOR = DEFAULT_CONFIG.default_lang_color
CARD_PADDING = DEFAULT_CONFIG.card_padding
COMPACT_LAYOUT_BASE_HEIGHT = DEFAULT_CONFIG.compact_layout_base_height

STATS_FORMAT_PERCENTAGES = "percentages"
STATS_FORMAT_BYTES = "bytes"

# ── Layout geometry constants ─────────────────────────────────────────────────
NORMAL_PADDING_RIGHT = 95
COMPACT_PADDING_RIGHT = 50
COMPACT_MIN_SEGMENT_WIDTH = 10
LEGEND_MIN_COLUMN_GAP = 150
DONUT_EXTRA_WIDTH = 50
DONUT_STROKE_WIDTH = 12
DONUT_VERTICAL_RADIUS = 80
DONUT_VERTICAL_STROKE_WIDTH = 25
PIE_RADIUS = 90
CIRCLE_CENTER_X = 150
CIRCLE_CENTER_Y = 100
LEGEND_OFFSET_Y = 220


@dataclass
class LayoutResult:
    """Rendered layout body and the canvas size it needs."""
    markup: str
    height: float
    width: Optional[float] = None


@dataclass
class ArcSegment:
    """
    One slice of the donut or pie.

    Fields:
        start_angle / end_angle: Cumulative angles in degrees (unshifted).
        start_point / end_point: Path endpoints on the circle.
        large_arc:               1 when the slice spans more than 180°.
        path:                    SVG path data.
        delay_ms:                Entrance stagger delay, None when static.
    """
    lang: LanguageStat
    percent: float
    start_angle: float
    end_angle: float
    start_point: Point
    end_point: Point
    large_arc: int
    path: str
    delay_ms: Optional[int] = None

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle


@dataclass
class DashSegment:
    """One language on the donut-vertical ring: a dash of ``length`` px
    placed ``offset`` px along the circle."""
    lang: LanguageStat
    percent: float
    length: float
    offset: float
    delay_ms: Optional[int] = None


@dataclass
class StripSpan:
    """One language on the compact strip. ``x`` advances by the true
    ``span``; ``width`` is the drawn width, never below 10 px."""
    lang: LanguageStat
    x: float
    span: float
    width: float


# ── Heights ───────────────────────────────────────────────────────────────────

def _half_rounded_up(total_langs: int) -> int:
    return (total_langs + 1) // 2


def normal_layout_height(total_langs: int) -> int:
    return 45 + (total_langs + 1) * 40


def compact_layout_height(total_langs: int, hide_progress: bool = False) -> int:
    height = COMPACT_LAYOUT_BASE_HEIGHT + _half_rounded_up(total_langs) * 25
    return height - 25 if hide_progress else height


def donut_layout_height(total_langs: int) -> int:
    return 215 + max(total_langs - 5, 0) * 32


def donut_vertical_layout_height(total_langs: int) -> int:
    return 300 + _half_rounded_up(total_langs) * 25


def pie_layout_height(total_langs: int) -> int:
    return 300 + _half_rounded_up(total_langs) * 25


def donut_center_translation(total_langs: int) -> int:
    """Vertical shift of the ring so it stays centred beside a taller legend."""
    return -45 + max(total_langs - 5, 0) * 16


# ── Shared text helpers ───────────────────────────────────────────────────────

def display_value(lang: LanguageStat, stats_format: str = STATS_FORMAT_PERCENTAGES) -> str:
    """Value shown next to a language: ``"12.34%"`` or a byte size."""
    if stats_format == STATS_FORMAT_BYTES:
        return format_bytes(lang.size)
    return f"{(lang.percent or 0):.2f}%"


def _stagger_attrs(delay: Optional[int]) -> str:
    if delay is None:
        return ""
    return f' class="stagger" style="animation-delay: {delay}ms"'


def _color(lang: LanguageStat) -> str:
    return lang.color or DEFAULT_LANG_COLOR


def longest_lang(langs: Sequence[LanguageStat]) -> Optional[LanguageStat]:
    """Language with the longest name; the first one wins on ties."""
    longest = None
    for lang in langs:
        if longest is None or len(lang.name) > len(longest.name):
            longest = lang
    return longest


def create_compact_lang_node(
    lang: LanguageStat,
    index: int,
    hide_progress: bool = False,
    stats_format: str = STATS_FORMAT_PERCENTAGES,
    animations: bool = True,
) -> str:
    """Legend chip: coloured dot, name and (optionally) value."""
    value = "" if hide_progress else display_value(lang, stats_format)
    delay = (index + 3) * 150 if animations else None
    return f"""
    <g{_stagger_attrs(delay)}>
      <circle cx="5" cy="6" r="5" fill="{_color(lang)}" />
      <text data-testid="lang-name" x="15" y="10" class='lang-name'>
        {escape_xml(lang.name)} {value}
      </text>
    </g>
    """


def legend_column_gap(
    langs: Sequence[LanguageStat],
    hide_progress: bool = False,
    stats_format: str = STATS_FORMAT_PERCENTAGES,
) -> float:
    """Gap between the two legend columns: wide enough for the longest entry."""
    longest = longest_lang(langs)
    if longest is None:
        return LEGEND_MIN_COLUMN_GAP
    value = "" if hide_progress else display_value(longest, stats_format)
    return max(LEGEND_MIN_COLUMN_GAP, 20 + measure_text(f"{longest.name} {value}", 11))


def create_language_text_node(
    langs: Sequence[LanguageStat],
    hide_progress: bool = False,
    stats_format: str = STATS_FORMAT_PERCENTAGES,
    animations: bool = True,
) -> str:
    """Two-column legend; the list is split into two contiguous halves."""
    chunks = chunk_array(list(langs), math.ceil(len(langs) / 2))
    columns = []
    for chunk in chunks:
        items = [
            create_compact_lang_node(lang, index, hide_progress, stats_format, animations)
            for index, lang in enumerate(chunk)
        ]
        columns.append("".join(flex_layout(items, gap=25, direction="column")))

    gap = legend_column_gap(langs, hide_progress, stats_format)
    return "".join(flex_layout(columns, gap=gap))


# ── Normal ────────────────────────────────────────────────────────────────────

def create_progress_text_node(
    lang: LanguageStat,
    index: int,
    width: float,
    stats_format: str = STATS_FORMAT_PERCENTAGES,
    animations: bool = True,
) -> str:
    stagger_delay = (index + 3) * 150
    progress_text_x = width - NORMAL_PADDING_RIGHT + 10
    progress_width = width - NORMAL_PADDING_RIGHT
    progress_bar = create_progress_node(
        x=0,
        y=25,
        width=progress_width,
        color=_color(lang),
        progress=lang.percent or 0,
        progress_bar_background_color="#ddd",
        delay=stagger_delay + 300 if animations else None,
    )
    return f"""
    <g{_stagger_attrs(stagger_delay if animations else None)}>
      <text data-testid="lang-name" x="2" y="15" class="lang-name">{escape_xml(lang.name)}</text>
      <text x="{format_number(progress_text_x)}" y="34" class="lang-name">{display_value(lang, stats_format)}</text>
      {progress_bar}
    </g>
    """


def render_normal_layout(
    langs: Sequence[LanguageStat],
    width: float,
    stats_format: str = STATS_FORMAT_PERCENTAGES,
    animations: bool = True,
) -> LayoutResult:
    rows = [
        create_progress_text_node(lang, index, width, stats_format, animations)
        for index, lang in enumerate(langs)
    ]
    return LayoutResult(
        markup="".join(flex_layout(rows, gap=40, direction="column")),
        height=normal_layout_height(len(langs)),
    )


# ── Compact ───────────────────────────────────────────────────────────────────

def compact_spans(langs: Sequence[LanguageStat], offset_width: float) -> list[StripSpan]:
    """Lay languages end to end along a strip ``offset_width`` px wide.

    Spans thinner than 10 px are drawn 10 px wide, but the next span still
    starts where the true span ends.
    """
    spans = []
    progress_offset = 0.0
    for lang in langs:
        span = (lang.percent or 0) / 100 * offset_width
        spans.append(
            StripSpan(
                lang=lang,
                x=progress_offset,
                span=span,
                width=max(span, COMPACT_MIN_SEGMENT_WIDTH),
            )
        )
        progress_offset += span
    return spans


def render_compact_layout(
    langs: Sequence[LanguageStat],
    width: float,
    hide_progress: bool = False,
    stats_format: str = STATS_FORMAT_PERCENTAGES,
    animations: bool = True,
) -> LayoutResult:
    offset_width = width - COMPACT_PADDING_RIGHT

    strip = ""
    if not hide_progress:
        rects = "".join(
            f"""
        <rect
          mask="url(#rect-mask)"
          data-testid="lang-progress"
          x="{format_number(span.x)}"
          y="0"
          width="{format_number(span.width)}"
          height="8"
          fill="{_color(span.lang)}"
        />
      """
            for span in compact_spans(langs, offset_width)
        )
        strip = f"""
      <mask id="rect-mask">
        <rect x="0" y="0" width="{format_number(offset_width)}" height="8" fill="white" rx="5"/>
      </mask>
      {rects}
    """

    markup = f"""
    {strip}
    <g transform="translate(0, {0 if hide_progress else 25})">
      {create_language_text_node(langs, hide_progress, stats_format, animations)}
    </g>
    """
    return LayoutResult(
        markup=markup,
        height=compact_layout_height(len(langs), hide_progress),
    )


# ── Donut ─────────────────────────────────────────────────────────────────────

def donut_segments(
    langs: Sequence[LanguageStat],
    center_x: float,
    center_y: float,
    radius: float,
    animations: bool = True,
) -> list[ArcSegment]:
    """Arc per language, starting at 12 o'clock.

    Angles advance by 3.6° per percent. Endpoints are taken 90° earlier so
    that angle 0 sits at the top of the ring.
    """
    segments = []
    start_angle = 0.0
    for index, lang in enumerate(langs):
        percent = lang.percent or 0
        end_angle = start_angle + 3.6 * percent
        start_point = polar_to_cartesian(center_x, center_y, radius, end_angle - 90)
        end_point = polar_to_cartesian(center_x, center_y, radius, start_angle - 90)
        large_arc = 0 if end_angle - start_angle <= 180 else 1
        path = (
            f"M {format_number(start_point.x)} {format_number(start_point.y)} "
            f"A {format_number(radius)} {format_number(radius)} 0 {large_arc} 0 "
            f"{format_number(end_point.x)} {format_number(end_point.y)}"
        )
        segments.append(
            ArcSegment(
                lang=lang,
                percent=percent,
                start_angle=start_angle,
                end_angle=end_angle,
                start_point=start_point,
                end_point=end_point,
                large_arc=large_arc,
                path=path,
                delay_ms=(index + 3) * 100 + 300 if animations else None,
            )
        )
        start_angle = end_angle
    return segments


def create_donut_languages_node(
    langs: Sequence[LanguageStat],
    stats_format: str = STATS_FORMAT_PERCENTAGES,
    animations: bool = True,
) -> str:
    items = [
        create_compact_lang_node(lang, index, False, stats_format, animations)
        for index, lang in enumerate(langs)
    ]
    return "".join(flex_layout(items, gap=32, direction="column"))


def render_donut_layout(
    langs: Sequence[LanguageStat],
    width: float,
    stats_format: str = STATS_FORMAT_PERCENTAGES,
    animations: bool = True,
) -> LayoutResult:
    """Ring of arcs; a single language is drawn as a plain stroked circle."""
    width = width + DONUT_EXTRA_WIDTH
    center_x = width / 3
    center_y = width / 3
    radius = center_x - 60

    if len(langs) == 1:
        lang = langs[0]
        ring = (
            f'<circle cx="{format_number(center_x)}" cy="{format_number(center_y)}" '
            f'r="{format_number(radius)}" stroke="{_color(lang)}" fill="none" '
            f'stroke-width="{DONUT_STROKE_WIDTH}" data-testid="lang-donut" size="100"/>'
        )
    else:
        ring = "".join(
            f"""
        <g{_stagger_attrs(segment.delay_ms)}>
          <path
            data-testid="lang-donut"
            size="{segment.percent}"
            d="{segment.path}"
            stroke="{_color(segment.lang)}"
            fill="none"
            stroke-width="{DONUT_STROKE_WIDTH}">
          </path>
        </g>
      """
            for segment in donut_segments(langs, center_x, center_y, radius, animations)
        )

    donut = f'<svg width="{format_number(width)}" height="{format_number(width)}">{ring}</svg>'
    markup = f"""
    <g transform="translate(0, 0)">
      <g transform="translate(0, 0)">
        {create_donut_languages_node(langs, stats_format, animations)}
      </g>
      <g transform="translate(125, {donut_center_translation(len(langs))})">
        {donut}
      </g>
    </g>
    """
    return LayoutResult(markup=markup, height=donut_layout_height(len(langs)), width=width)


# ── Donut vertical ────────────────────────────────────────────────────────────

def donut_vertical_segments(
    langs: Sequence[LanguageStat],
    radius: float = DONUT_VERTICAL_RADIUS,
    animations: bool = True,
) -> list[DashSegment]:
    """Partition the circumference into consecutive dashes, one per language."""
    total_length = circle_length(radius)
    segments = []
    indent = 0.0
    for position, lang in enumerate(langs, start=1):
        percent = lang.percent or 0
        length = total_length * (percent / 100)
        segments.append(
            DashSegment(
                lang=lang,
                percent=percent,
                length=length,
                offset=indent,
                delay_ms=position * 100 if animations else None,
            )
        )
        indent += length
    return segments


def _legend_below(langs: Sequence[LanguageStat], stats_format: str, animations: bool) -> str:
    return f"""
      <g transform="translate(0, {LEGEND_OFFSET_Y})">
        <svg data-testid="lang-names" x="{CARD_PADDING}">
          {create_language_text_node(langs, False, stats_format, animations)}
        </svg>
      </g>
    """


def render_donut_vertical_layout(
    langs: Sequence[LanguageStat],
    stats_format: str = STATS_FORMAT_PERCENTAGES,
    animations: bool = True,
) -> LayoutResult:
    total_length = circle_length(DONUT_VERTICAL_RADIUS)
    circles = "".join(
        f"""
      <g{_stagger_attrs(segment.delay_ms)}>
        <circle
          cx="{CIRCLE_CENTER_X}"
          cy="{CIRCLE_CENTER_Y}"
          r="{DONUT_VERTICAL_RADIUS}"
          fill="transparent"
          stroke="{_color(segment.lang)}"
          stroke-width="{DONUT_VERTICAL_STROKE_WIDTH}"
          stroke-dasharray="{format_number(segment.length)} {format_number(total_length)}"
          stroke-dashoffset="{format_number(-segment.offset)}"
          size="{segment.percent}"
          data-testid="lang-donut"
        />
      </g>
    """
        for segment in donut_vertical_segments(langs, DONUT_VERTICAL_RADIUS, animations)
    )
    markup = f"""
    <svg data-testid="lang-items">
      <g transform="translate(0, 0)">
        <svg data-testid="donut">{circles}</svg>
      </g>
      {_legend_below(langs, stats_format, animations)}
    </svg>
    """
    return LayoutResult(markup=markup, height=donut_vertical_layout_height(len(langs)))


# ── Pie ───────────────────────────────────────────────────────────────────────

def pie_wedges(
    langs: Sequence[LanguageStat],
    center_x: float = CIRCLE_CENTER_X,
    center_y: float = CIRCLE_CENTER_Y,
    radius: float = PIE_RADIUS,
    animations: bool = True,
) -> list[ArcSegment]:
    """Wedge per language, starting at 3 o'clock and running clockwise."""
    wedges = []
    start_angle = 0.0
    for position, lang in enumerate(langs, start=1):
        percent = lang.percent or 0
        angle = percent / 100 * 360
        end_angle = start_angle + angle
        start_point = polar_to_cartesian(center_x, center_y, radius, start_angle)
        end_point = polar_to_cartesian(center_x, center_y, radius, end_angle)
        large_arc = 1 if angle > 180 else 0
        path = (
            f"M {format_number(center_x)} {format_number(center_y)} "
            f"L {format_number(start_point.x)} {format_number(start_point.y)} "
            f"A {format_number(radius)} {format_number(radius)} 0 {large_arc} 1 "
            f"{format_number(end_point.x)} {format_number(end_point.y)} Z"
        )
        wedges.append(
            ArcSegment(
                lang=lang,
                percent=percent,
                start_angle=start_angle,
                end_angle=end_angle,
                start_point=start_point,
                end_point=end_point,
                large_arc=large_arc,
                path=path,
                delay_ms=position * 100 if animations else None,
            )
        )
        start_angle = end_angle
    return wedges


def render_pie_layout(
    langs: Sequence[LanguageStat],
    stats_format: str = STATS_FORMAT_PERCENTAGES,
    animations: bool = True,
) -> LayoutResult:
    """Pie of wedges; a single language is drawn as a filled circle."""
    if len(langs) == 1:
        shapes = (
            f'<circle cx="{CIRCLE_CENTER_X}" cy="{CIRCLE_CENTER_Y}" r="{PIE_RADIUS}" '
            f'fill="{_color(langs[0])}" data-testid="lang-pie" size="100"/>'
        )
    else:
        shapes = "".join(
            f"""
      <g{_stagger_attrs(wedge.delay_ms)}>
        <path
          data-testid="lang-pie"
          size="{wedge.percent}"
          d="{wedge.path}"
          fill="{_color(wedge.lang)}"
        />
      </g>
    """
            for wedge in pie_wedges(langs, animations=animations)
        )
    markup = f"""
    <svg data-testid="lang-items">
      <g transform="translate(0, 0)">
        <svg data-testid="pie">{shapes}</svg>
      </g>
      {_legend_below(langs, stats_format, animations)}
    </svg>
    """
    return LayoutResult(markup=markup, height=pie_layout_height(len(langs)))


# ── No data ───────────────────────────────────────────────────────────────────

def render_no_languages(text: str, color: str, layout: Optional[str] = None) -> LayoutResult:
    """Placeholder shown when no language survives trimming."""
    x = CARD_PADDING if layout in ("pie", "donut-vertical") else 0
    markup = (
        f'<text x="{x}" y="11" class="stat bold" fill="{color}">{escape_xml(text)}</text>'
    )
    return LayoutResult(markup=markup, height=COMPACT_LAYOUT_BASE_HEIGHT)
