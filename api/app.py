"""
Module 09D - FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.deps import get_runtime_config
from api.routes import health, sim
from api.errors import (
    APIError,
    api_error_handler,
    generic_error_handler,
    request_validation_error_handler,
)
from core.config.runtime import RuntimeConfig


def configure_logging(config: RuntimeConfig) -> None:
    """Configure root logging from CAPSULE_LOG_LEVEL / capsule.json log_level."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )


def create_app(config: RuntimeConfig | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Explicit runtime config; when omitted it is loaded from
            capsule.json / environment on first use.
    """
    runtime_config = config or get_runtime_config()

    app = FastAPI(
        title="Capsule Simulator API",
        description="""
HTTP API for the capsule commitment demo.

## Endpoints

- **POST /sim/generate** - Derive synthetic capsules, commit with a Merkle tree,
  return the anchor root and one sampled proof
- **POST /sim/verify** - Replay a sampled proof against an anchor root
- **POST /sim/estimate** - Illustrative storage footprint and latency figures
- **GET /health** - Health check

All figures are simulated and non-authoritative.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if config is not None:
        app.dependency_overrides[get_runtime_config] = lambda: config

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=runtime_config.service.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(sim.router)

    return app


def load_app_config() -> RuntimeConfig:
    """Config for the module-level app; defaults when the config file or env is unusable."""
    try:
        return get_runtime_config()
    except Exception as e:
        logging.getLogger(__name__).warning(
            f"Ignoring unusable runtime config, using defaults: {e}"
        )
        return RuntimeConfig()


_module_config = load_app_config()
configure_logging(_module_config)

# Create the application instance
app = create_app(_module_config)


if __name__ == "__main__":
    import uvicorn

    service = _module_config.service
    uvicorn.run(app, host=service.host, port=service.port)
