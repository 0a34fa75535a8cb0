from __future__ import annotations

import contextlib
import logging

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from dotenv import load_dotenv

from kvdb import open_configured_database
from kvdb.settings import get_settings

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    from endpoints.mcp_endpoints import mcp
    from endpoints.state import bind_database, unbind_database

    # The handle is flushed and closed when this block exits, including on errors.
    with open_configured_database(app.state.settings) as db:
        bind_database(db)
        try:
            async with mcp.session_manager.run():
                yield
        finally:
            unbind_database()
    logger.info("KVDB CLOSE: flushed %s", app.state.settings.db_path)


def create_app() -> FastAPI:
    load_dotenv("local.env")
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    from endpoints.kv_endpoints import router as kv_router
    from endpoints.mcp_endpoints import mcp

    mcp.settings.streamable_http_path = "/"

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings

    @app.post("/mcp")
    async def mcp_redirect_post():
        return RedirectResponse(url="/mcp/", status_code=307)

    @app.get("/mcp")
    async def mcp_redirect_get():
        return RedirectResponse(url="/mcp/", status_code=307)

    app.include_router(kv_router)

    app.mount("/mcp", mcp.streamable_http_app())

    return app


app = create_app()
