"""
SVG building blocks shared by every layout.

flex_layout stacks pre-rendered items along one axis, create_progress_node
draws a rounded progress bar, and measure_text estimates rendered text width
with matplotlib's font machinery (DejaVu Sans, shipped with matplotlib).
"""
import html
import math
from typing import Any, Iterable, Optional, Sequence

from matplotlib.font_manager import FontProperties
from matplotlib.textpath import TextToPath

_TEXT_TO_PATH = TextToPath()
_MEASURE_FONT_FAMILY = "DejaVu Sans"

BYTE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB", "EB"]


def escape_xml(text: Any) -> str:
    """Escape text for use inside SVG text nodes and attributes."""
    return html.escape(str(text), quote=True)


def format_number(value: float) -> str:
    """Compact decimal form for SVG attributes (at most 3 decimals).

    >>> format_number(150.0)
    '150'
    >>> format_number(0.1 + 0.2)
    '0.3'
    """
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def clamp_value(number: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(number, maximum))


def lowercase_trim(name: str) -> str:
    return str(name).lower().strip()


def chunk_array(items: Sequence, per_chunk: int) -> list[list]:
    """Split ``items`` into consecutive chunks of ``per_chunk`` elements."""
    if per_chunk <= 0:
        return [list(items)] if items else []
    return [list(items[i:i + per_chunk]) for i in range(0, len(items), per_chunk)]


def parse_array(value: Optional[str]) -> list[str]:
    """Split a comma-separated query value; empty parts are dropped."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v]
    return [part for part in str(value).split(",") if part]


def parse_boolean(value: Any) -> Optional[bool]:
    """Parse "true"/"false" (any case); anything else is None."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


def format_bytes(num_bytes: float) -> str:
    """Human-readable byte size with one decimal (base 1024).

    >>> format_bytes(0)
    '0 B'
    >>> format_bytes(1536)
    '1.5 KB'
    """
    if not num_bytes or num_bytes <= 0 or not math.isfinite(num_bytes):
        return "0 B"
    exponent = int(math.floor(math.log(num_bytes) / math.log(1024)))
    exponent = int(clamp_value(exponent, 0, len(BYTE_UNITS) - 1))
    return f"{num_bytes / 1024 ** exponent:.1f} {BYTE_UNITS[exponent]}"


def measure_text(text: str, font_size: float = 10) -> float:
    """Approximate rendered width of ``text`` in pixels at ``font_size``."""
    if not text:
        return 0.0
    prop = FontProperties(family=_MEASURE_FONT_FAMILY, size=font_size)
    width, _height, _descent = _TEXT_TO_PATH.get_text_width_height_descent(
        text, prop, ismath=False
    )
    return float(width)


def flex_layout(
    items: Iterable[str],
    gap: float,
    direction: str = "row",
    sizes: Optional[Sequence[float]] = None,
) -> list[str]:
    """Wrap each item in a <g> translated along the main axis.

    Item i is placed at sum(sizes[:i]) + i × gap; missing sizes count as 0.
    Empty items are skipped.
    """
    sizes = sizes or []
    last_size = 0.0
    placed = []
    for index, item in enumerate(i for i in items if i):
        size = sizes[index] if index < len(sizes) else 0
        if direction == "column":
            transform = f"translate(0, {format_number(last_size)})"
        else:
            transform = f"translate({format_number(last_size)}, 0)"
        last_size += size + gap
        placed.append(f'<g transform="{transform}">{item}</g>')
    return placed


def create_progress_node(
    x: float,
    y: float,
    width: float,
    color: str,
    progress: float,
    progress_bar_background_color: str,
    delay: Optional[int] = None,
) -> str:
    """Rounded progress bar; the filled part is at least 2% wide."""
    progress_percentage = clamp_value(progress, 2, 100)
    delay_style = f' style="animation-delay: {delay}ms;"' if delay is not None else ""
    return f"""
    <svg width="{format_number(width)}" x="{format_number(x)}" y="{format_number(y)}">
      <rect rx="5" ry="5" x="0" y="0" width="{format_number(width)}" height="8" fill="{progress_bar_background_color}"></rect>
      <svg data-testid="lang-progress" width="{format_number(progress_percentage)}%">
        <rect height="8" fill="{color}" rx="5" ry="5" x="0" y="0" class="lang-progress"{delay_style} />
      </svg>
    </svg>
    """
