from __future__ import annotations

import logging
import threading
import webbrowser
from pathlib import Path

from ..config import WebConfig

log = logging.getLogger(__name__)

BROWSER_DELAY_S = 0.4


def docs_url(web: WebConfig) -> str:
    return f"http://{web.host}:{web.port}/docs"


def serve(
    web: WebConfig,
    *,
    config_path: Path | None = None,
    log_level: str = "info",
) -> int:
    """Run the calculator HTTP API until interrupted."""
    try:
        import uvicorn  # type: ignore
    except ImportError:  # pragma: no cover
        raise RuntimeError(
            "Web dependencies missing. Install with: pip install 'dndcalc[web]'"
        ) from None

    from .app import create_app

    app = create_app(config_path=config_path)
    url = docs_url(web)
    log.info("Serving dice calculator API on %s", url)

    if web.open_browser:
        # Timer fires once uvicorn is likely listening.
        timer = threading.Timer(BROWSER_DELAY_S, webbrowser.open, args=(url,))
        timer.daemon = True
        timer.start()

    uvicorn.run(app, host=web.host, port=int(web.port), log_level=log_level.lower())
    return 0
