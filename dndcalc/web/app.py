import logging
import random
from pathlib import Path
from typing import Any

from ..calculator import try_calculate
from ..config import default_config_path, load_config

log = logging.getLogger(__name__)


def _parse_seed(value: Any) -> int | None:
    # JSON true/false and fractional numbers are not seeds.
    if isinstance(value, bool) or isinstance(value, float):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def create_app(config_path: Path | None = None):
    try:
        from fastapi import FastAPI, HTTPException, Request
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError as e:  # pragma: no cover
        raise RuntimeError(
            "Web dependencies missing. Install with: pip install 'dndcalc[web]'"
        ) from e

    cfg_path = config_path or default_config_path()

    app = FastAPI(title="dndcalc")

    # Local-only API: allow browser origins on localhost/127.0.0.1.
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"^http://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health() -> Any:
        return {"ok": True}

    @app.post("/api/calculate")
    async def calculate(req: Request) -> Any:
        try:
            raw = await req.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="body must be JSON") from None
        if not isinstance(raw, dict):
            raise HTTPException(status_code=400, detail="invalid body")

        request = raw.get("request")
        if not isinstance(request, str):
            raise HTTPException(status_code=400, detail="request must be a string")

        seed = raw.get("seed")
        if seed is None or seed == "":
            seed_i = load_config(cfg_path).calculator.seed
        else:
            seed_i = _parse_seed(seed)
            if seed_i is None:
                raise HTTPException(status_code=400, detail="seed must be int")

        outcome = try_calculate(
            request, rng=random.Random(seed_i) if seed_i is not None else None
        )
        if not outcome.ok:
            return JSONResponse(status_code=400, content=outcome.to_dict())
        log.debug("Calculated %r -> %s", request, outcome.result)
        return outcome.to_dict()

    return app
