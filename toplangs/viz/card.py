"""
Card frame shared by the language card and the error card.

The frame draws the background rectangle, the title and the common
animations, then places the layout body below the title. Layout code only
supplies the body markup, its own CSS and the canvas size.
"""
from typing import Optional

from toplangs.viz.primitives import escape_xml, format_number
from toplangs.viz.themes import CardColors, get_card_colors

ERROR_CARD_LENGTH = 576.5

CARD_ANIMATIONS = """
      /* Animations */
      @keyframes scaleInAnimation {
        from { transform: translate(-5px, 5px) scale(0); }
        to { transform: translate(-5px, 5px) scale(1); }
      }
      @keyframes fadeInAnimation {
        from { opacity: 0; }
        to { opacity: 1; }
      }
"""

DISABLED_ANIMATIONS_CSS = "* { animation-duration: 0s !important; animation-delay: 0s !important; }"


class Card:
    """SVG card chrome around a pre-rendered body.

    Args:
        width, height: Canvas size in px.
        colors: Resolved colours; the default theme when None.
        title: Title text (a custom title wins over the default title).
        border_radius: Corner radius of the background rectangle.
    """

    padding_x = 25
    padding_y = 35

    def __init__(
        self,
        width: float = 100,
        height: float = 100,
        colors: Optional[CardColors] = None,
        custom_title: Optional[str] = None,
        default_title: str = "",
        border_radius: float = 4.5,
    ) -> None:
        self.width = width
        self.height = height
        self.colors = colors or get_card_colors()
        self.title = custom_title if custom_title is not None else default_title
        self.border_radius = border_radius
        self.css = ""
        self.hide_border = False
        self.hide_title = False
        self.animations = True

    def disable_animations(self) -> None:
        self.animations = False

    def set_css(self, css: str) -> None:
        self.css = css

    def set_hide_border(self, value: bool) -> None:
        self.hide_border = bool(value)

    def set_hide_title(self, value: bool) -> None:
        self.hide_title = bool(value)
        if self.hide_title:
            self.height -= 30

    def _render_title(self) -> str:
        return f"""
      <g data-testid="card-title" transform="translate({self.padding_x}, {self.padding_y})">
        <text x="0" y="0" class="header" data-testid="header">{escape_xml(self.title)}</text>
      </g>
    """

    def _render_gradient(self) -> str:
        bg = self.colors.bg_color
        if not isinstance(bg, list):
            return ""
        angle, *stops = bg
        step = 100 / (len(stops) - 1)
        stop_nodes = "".join(
            f'<stop offset="{format_number(index * step)}%" stop-color="#{color}" />'
            for index, color in enumerate(stops)
        )
        return f"""
      <defs>
        <linearGradient id="gradient" gradientTransform="rotate({angle})" gradientUnits="userSpaceOnUse">
          {stop_nodes}
        </linearGradient>
      </defs>
    """

    def render(self, body: str) -> str:
        bg = self.colors.bg_color
        fill = "url(#gradient)" if isinstance(bg, list) else bg
        body_offset = self.padding_x if self.hide_title else self.padding_y + 20
        return f"""
    <svg
      width="{format_number(self.width)}"
      height="{format_number(self.height)}"
      viewBox="0 0 {format_number(self.width)} {format_number(self.height)}"
      fill="none"
      xmlns="http://www.w3.org/2000/svg"
      role="img"
      aria-labelledby="descId"
    >
      <title id="titleId">{escape_xml(self.title)}</title>
      <desc id="descId">{escape_xml(self.title)}</desc>
      <style>
        .header {{
          font: 600 18px 'Segoe UI', Ubuntu, Sans-Serif;
          fill: {self.colors.title_color};
          animation: fadeInAnimation 0.8s ease-in-out forwards;
        }}
        @supports(-moz-appearance: auto) {{
          .header {{ font-size: 15.5px; }}
        }}
        {self.css}
        {CARD_ANIMATIONS}
        {"" if self.animations else DISABLED_ANIMATIONS_CSS}
      </style>
      {self._render_gradient()}
      <rect
        data-testid="card-bg"
        x="0.5"
        y="0.5"
        rx="{self.border_radius}"
        height="99%"
        stroke="{self.colors.border_color}"
        width="{format_number(self.width - 1)}"
        fill="{fill}"
        stroke-opacity="{0 if self.hide_border else 1}"
      />
      {"" if self.hide_title else self._render_title()}
      <g data-testid="main-card-body" transform="translate(0, {body_offset})">
        {body}
      </g>
    </svg>
    """


def render_error(
    message: str,
    secondary_message: str = "",
    title_color: Optional[str] = None,
    text_color: Optional[str] = None,
    bg_color: Optional[str] = None,
    border_color: Optional[str] = None,
    theme: Optional[str] = None,
) -> str:
    """Error card using the same colour options as the language card."""
    colors = get_card_colors(
        title_color=title_color,
        text_color=text_color,
        bg_color=bg_color,
        border_color=border_color,
        theme=theme,
    )
    bg = colors.bg_color
    # Gradients are not supported on the error card; use the first stop.
    fill = f"#{bg[1]}" if isinstance(bg, list) else bg
    return f"""
    <svg width="{ERROR_CARD_LENGTH}" height="120" viewBox="0 0 {ERROR_CARD_LENGTH} 120" fill="{fill}" xmlns="http://www.w3.org/2000/svg">
    <style>
    .text {{ font: 600 16px 'Segoe UI', Ubuntu, Sans-Serif; fill: {colors.title_color} }}
    .small {{ font: 600 12px 'Segoe UI', Ubuntu, Sans-Serif; fill: {colors.text_color} }}
    .gray {{ fill: #858585 }}
    </style>
    <rect x="0.5" y="0.5" width="{ERROR_CARD_LENGTH - 1}" height="99%" rx="4.5" fill="{fill}" stroke="{colors.border_color}"/>
    <text x="25" y="45" class="text">Something went wrong!</text>
    <text data-testid="message" x="25" y="55" class="text small">
      <tspan x="25" dy="18">{escape_xml(message)}</tspan>
      <tspan x="25" dy="18" class="gray">{escape_xml(secondary_message)}</tspan>
    </text>
    </svg>
    """
