import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import bots, chat, health, market, rewards, threads
from .config import settings
from .context import AppContext
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware
from .providers.errors import BackendError, BackendResponseError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    context = getattr(app.state, "context", None)
    if context is None:
        context = AppContext(settings)
        app.state.context = context
    logger.info(
        f"wac API starting: backend={context.settings.api_base_url or '-'} "
        f"chat_api={'on' if context.transport.enabled else 'off'}"
    )
    try:
        yield
    finally:
        await context.aclose()


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """Build the FastAPI app; tests pass a prebuilt context."""
    app = FastAPI(
        title="wac.ai API",
        description="Talk-to-Invest chat backend",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    if context is not None:
        app.state.context = context

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(BackendError)
    async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
        # Client errors keep their status; outages never surface as 500s
        status_code = 503
        if isinstance(exc, BackendResponseError) and exc.status_code and not exc.is_server_error:
            status_code = exc.status_code
        logger.warning(f"Backend error on {request.url.path}: {exc}")
        return JSONResponse(status_code=status_code, content={"success": False, "error": str(exc)})

    app.include_router(health.router, tags=["Health"])
    app.include_router(chat.router, tags=["Chat"])
    app.include_router(threads.router, tags=["Threads"])
    app.include_router(market.router, tags=["Market"])
    app.include_router(bots.router, tags=["Bots"])
    app.include_router(rewards.router, tags=["Play to Earn"])

    @app.get("/")
    async def root():
        """Root endpoint with basic info"""
        return {
            "name": "wac.ai API",
            "version": __version__,
            "description": "Talk-to-Invest chat backend",
            "docs": "/docs",
            "health": "/healthz",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "wac.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower()
    )
