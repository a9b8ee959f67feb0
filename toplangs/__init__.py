"""
toplangs — Most-used-languages cards for GitHub profiles.

Aggregates the language byte counts of a user's repositories into a weighted,
normalized language table and renders it as an SVG card in one of five
layouts: normal (bar list), compact, donut, donut-vertical and pie.

Subpackages:
- toplangs.ingestion: GitHub GraphQL transport + retry with backoff
- toplangs.metrics:   language aggregation, weighting and normalization
- toplangs.viz:       geometry, layouts, card frame, themes, translations
- toplangs.api:       FastAPI endpoint serving the SVG card
"""

__version__ = "0.1.0"
