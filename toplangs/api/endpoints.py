"""
toplangs/api/endpoints.py — FastAPI endpoint serving the language card.

Endpoint summary:
    GET /api/health      — Liveness probe.
    GET /api/top-langs   — Most-used-languages card as image/svg+xml.

Query parameters of /api/top-langs:
    username (required), hide, hide_title, hide_border, card_width,
    title_color, text_color, bg_color, border_color, theme, layout,
    langs_count, border_radius, locale, disable_animations, hide_progress,
    stats_format, custom_title, exclude_repo, size_weight, count_weight,
    cache_seconds.

List parameters are comma-separated; booleans are "true"/"false".
The endpoint always answers 200 with an SVG: failures are rendered as an
error card.
"""

import logging
import time
from typing import Callable, Optional

from toplangs import __version__
from toplangs.config import DEFAULT_CONFIG, TopLangsConfig
from toplangs.pipeline import build_top_languages_card, resolve_token
from toplangs.viz.primitives import parse_array, parse_boolean
from toplangs.viz.top_languages import TopLangsOptions

logger = logging.getLogger(__name__)

# ── Optional FastAPI / Pydantic dependency ─────────────────────────────────────
try:
    from fastapi import FastAPI, Query
    from fastapi.responses import Response
    from pydantic import BaseModel
    HAS_FASTAPI = True
except ImportError:
    FastAPI = None
    BaseModel = object
    HAS_FASTAPI = False

SVG_MEDIA_TYPE = "image/svg+xml"


if HAS_FASTAPI:
    class HealthResponse(BaseModel):
        """Health check response."""
        status: str
        version: str


def create_app(
    token_fn: Callable[[], Optional[str]] = resolve_token,
    client_factory: Optional[Callable[[str], object]] = None,
    config: TopLangsConfig = DEFAULT_CONFIG,
    sleep: Callable[[float], None] = time.sleep,
) -> "FastAPI":
    """
    Create and return the toplangs FastAPI application.

    Args:
        token_fn:       Returns the GitHub credential for each request.
                        Defaults to reading PAT_1 / GITHUB_TOKEN.
        client_factory: Builds the GraphQL transport from the token. When
                        None the default urllib transport is used. Tests
                        inject a fake here.
        config:         TopLangsConfig passed down to the pipeline.
        sleep:          Backoff sleep function.

    Returns:
        Configured FastAPI application instance.

    Raises:
        ImportError: If fastapi or pydantic are not installed.
    """
    if not HAS_FASTAPI:
        raise ImportError("fastapi and pydantic are required: pip install 'toplangs[api]'")

    app = FastAPI(
        title="toplangs",
        version=__version__,
        description="Most-used-languages SVG cards for GitHub profiles.",
    )

    @app.get("/api/health", response_model=HealthResponse, tags=["system"])
    async def health() -> dict:
        """Liveness probe — returns service status and version."""
        return {"status": "ok", "version": __version__}

    @app.get("/api/top-langs", tags=["cards"])
    def top_langs(
        username: Optional[str] = Query(None),
        hide: Optional[str] = Query(None),
        hide_title: Optional[str] = Query(None),
        hide_border: Optional[str] = Query(None),
        card_width: Optional[str] = Query(None),
        title_color: Optional[str] = Query(None),
        text_color: Optional[str] = Query(None),
        bg_color: Optional[str] = Query(None),
        border_color: Optional[str] = Query(None),
        theme: Optional[str] = Query(None),
        layout: Optional[str] = Query(None),
        langs_count: Optional[str] = Query(None),
        border_radius: Optional[str] = Query(None),
        locale: Optional[str] = Query(None),
        disable_animations: Optional[str] = Query(None),
        hide_progress: Optional[str] = Query(None),
        stats_format: Optional[str] = Query(None),
        custom_title: Optional[str] = Query(None),
        exclude_repo: Optional[str] = Query(None),
        size_weight: Optional[str] = Query(None),
        count_weight: Optional[str] = Query(None),
        cache_seconds: Optional[str] = Query(None),
    ) -> Response:
        """Render the language card for ``username``."""
        options = TopLangsOptions(
            hide=parse_array(hide),
            hide_title=bool(parse_boolean(hide_title)),
            hide_border=bool(parse_boolean(hide_border)),
            card_width=card_width,
            title_color=title_color,
            text_color=text_color,
            bg_color=bg_color,
            border_color=border_color,
            theme=theme,
            layout=layout,
            locale=locale.lower() if locale else None,
            langs_count=langs_count,
            border_radius=border_radius,
            disable_animations=bool(parse_boolean(disable_animations)),
            hide_progress=bool(parse_boolean(hide_progress)),
            stats_format=stats_format or "percentages",
            custom_title=custom_title,
        )

        token = token_fn()
        client = client_factory(token) if (client_factory and token) else None

        result = build_top_languages_card(
            username or "",
            options,
            exclude_repo=parse_array(exclude_repo),
            size_weight=size_weight,
            count_weight=count_weight,
            cache_seconds=cache_seconds,
            token=token,
            client=client,
            config=config,
            sleep=sleep,
        )
        return Response(
            content=result.svg,
            media_type=SVG_MEDIA_TYPE,
            headers={"Cache-Control": result.cache_control},
        )

    logger.info("toplangs FastAPI application created with 2 endpoints.")
    return app
