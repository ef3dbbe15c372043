import logging
from typing import Awaitable, Callable

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from rotolink.config import settings
from rotolink.scrape.base import SOURCE_LABELS, UpstreamDecodeError, UpstreamFetchError
from rotolink.services.lineups import (
    LineupResult,
    build_lineup_result,
    fetch_inputs,
    serialize_lineups,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="rotolink")

LineupFetcher = Callable[[], Awaitable[LineupResult]]


def get_lineup_fetcher() -> LineupFetcher:
    """
    Dependency returning the coroutine that builds the lineup map.

    Fetches on the event loop, then parses and matches in a worker thread.
    Tests override this with app.dependency_overrides.
    """
    async def _fetch() -> LineupResult:
        document, roster = await fetch_inputs(settings)
        return await run_in_threadpool(build_lineup_result, document, roster)

    return _fetch


def cache_control_header() -> str:
    return (
        f"s-maxage={settings.cache_max_age}, "
        f"stale-while-revalidate={settings.cache_stale_while_revalidate}"
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/lineups")
async def lineups(fetcher: LineupFetcher = Depends(get_lineup_fetcher)):
    """
    Predicted lineups from RotoWire matched to FPL players.

    Returns {"<home_team_id>-<away_team_id>": {"home": [...], "away": [...]}}.
    Each player: {fpl_id, web_name, rw_name, rw_position, status[, reason]}.
    """
    try:
        result = await fetcher()
    except UpstreamFetchError as exc:
        return JSONResponse(
            {"error": f"{SOURCE_LABELS[exc.source]} fetch error", "code": exc.code},
            status_code=502,
        )
    except UpstreamDecodeError as exc:
        logger.error("lineups decode error: %s", exc)
        return JSONResponse(
            {"error": "Failed to fetch lineups", "code": exc.code},
            status_code=500,
        )
    except Exception:
        logger.exception("lineups error")
        return JSONResponse(
            {"error": "Failed to fetch lineups", "code": "internal_error"},
            status_code=500,
        )

    return JSONResponse(
        serialize_lineups(result),
        headers={"Cache-Control": cache_control_header()},
    )


# Only for debugging
if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=settings.log_level, format=settings.log_format)
    uvicorn.run("rotolink.web.main:app", host=settings.api_host, port=settings.api_port, reload=settings.api_reload)
