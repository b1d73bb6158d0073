"""FastAPI application entry point.

Creates the app, registers routes, and manages the store lifecycle.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from fresh_server import __version__
from fresh_server.api import configs, system
from fresh_server.config import get_config
from fresh_server.errors import ConfigError
from fresh_server.logging_setup import configure_logging
from fresh_server.store import ConfigStore, SqlConfigStore

logger = logging.getLogger(__name__)

# Applied uniformly by uvicorn to idle connections and to shutdown draining.
KEEP_ALIVE_TIMEOUT = 15
GRACEFUL_SHUTDOWN_TIMEOUT = 20


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the configured store on startup unless one was injected."""
    owned = app.state.store is None
    if owned:
        config = get_config()
        app.state.store = await SqlConfigStore.open(config.resolved_data_path)
        if app.state.release is None:
            app.state.release = config.serve_release

    logger.info("Starting the server")

    yield

    logger.info("Stopping the server")
    if owned:
        await app.state.store.close()
        app.state.store = None


def create_app(store: ConfigStore | None = None, *, release: str | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Without *store*, the lifespan opens :class:`SqlConfigStore` at the
    configured data path and closes it again on shutdown.
    """
    app = FastAPI(
        title="fresh-server",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.release = release

    app.include_router(system.router)
    app.include_router(configs.router)

    return app


# For uvicorn: `uvicorn fresh_server.main:app`
app = create_app()


def main() -> int:
    """Run the service with settings from the environment."""
    import uvicorn

    try:
        config = get_config()
    except ConfigError as e:
        print(f"Error: unable to initialize web-server: {e}", file=sys.stderr)
        return 1

    configure_logging(config.serve_log_env, config.serve_release)
    logger.info("Listening on %s", config.address)

    uvicorn.run(
        create_app(release=config.serve_release),
        host=config.serve_host,
        port=config.serve_port,
        timeout_keep_alive=KEEP_ALIVE_TIMEOUT,
        timeout_graceful_shutdown=GRACEFUL_SHUTDOWN_TIMEOUT,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
