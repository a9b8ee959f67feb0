"""
toplangs.viz — SVG rendering of the language card.

Modules:
    geometry       — Polar/Cartesian conversion, circumference.
    primitives     — flex layout, progress bar, text measurement, byte format.
    layouts        — normal, compact, donut, donut-vertical and pie renderers.
    top_languages  — Trimming, default counts and the render entry point.
    card           — Card frame and error card.
    themes         — Colour themes and colour resolution.
    i18n           — Localized card strings.
"""

from toplangs.viz.top_languages import TopLangsOptions, render_top_languages
