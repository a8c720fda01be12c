"""Main FastAPI application for the Demo Users API"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Config, load_config
from .core.error_handlers import register_error_handlers
from .core.exceptions import ConfigError, MissingConfigError
from .core.log_config import configure_logging
from .core.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from .routers import system, users
from .routers.system import API_VERSION
from .services.user_store import UserStore


logger = logging.getLogger(__name__)

# Settings that must be present before serving in production
REQUIRED_IN_PRODUCTION = ("JWT_SECRET",)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    config: Config = app.state.config
    server = config.get_server_config()
    logger.info(
        "Starting Demo Users API...",
        extra={"environment": config.environment, "port": server.port},
    )
    yield
    logger.info("Demo Users API shutdown complete")


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Build the application around an already loaded configuration.

    Raises:
        ConfigError: when ``config`` is omitted and the environment is invalid.
        MissingConfigError: production settings listed in
            ``REQUIRED_IN_PRODUCTION`` are unset.
    """
    config = config or load_config()
    if config.is_production():
        config.validate_required(REQUIRED_IN_PRODUCTION)

    configure_logging(config.get_logging_config(), environment=config.environment)

    app = FastAPI(
        title="Demo Users API",
        description="Demonstration API with schema-driven request validation",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.user_store = UserStore.with_sample_users()

    app.add_middleware(RequestContextMiddleware)

    server = config.get_server_config()
    origins = list(server.cors.origins) or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=server.cors.credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )

    register_error_handlers(app, config)

    app.include_router(system.router, tags=["system"])
    app.include_router(users.router, prefix="/api/v1/users", tags=["users"])

    return app


def run() -> None:
    """Console entry point: load ``.env``, validate settings, serve"""
    import uvicorn
    from dotenv import load_dotenv

    load_dotenv()
    try:
        config = load_config()
        app = create_app(config)
    except (ConfigError, MissingConfigError) as exc:
        raise SystemExit(f"[config] {exc}") from exc

    server = config.get_server_config()
    uvicorn.run(
        app,
        host=server.host,
        port=server.port,
        log_level="warning" if config.get("LOG_LEVEL") == "warn" else config.get("LOG_LEVEL"),
    )


if __name__ == "__main__":
    run()
