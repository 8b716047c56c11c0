import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis

import config
from db import create_db_and_tables
from middleware.security_headers import SecurityHeadersMiddleware, CSPMiddleware
from utils.error_handler import install_exception_handlers
from web.cart_router import cart_router
from web.dashboard_router import dashboard_router
from web.orders_router import orders_router
from web.partners_router import partners_router
from web.parts_router import parts_router
from web.quotes_router import quotes_router
from web.users_router import users_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown."""
    # Startup
    await create_db_and_tables()
    app.state.redis = Redis(host=config.REDIS_HOST, password=config.REDIS_PASSWORD, decode_responses=True)
    logging.info(f"[Startup] Storefront API ready (environment: {config.RUNTIME_ENVIRONMENT.value})")

    yield

    # Shutdown
    logging.warning('Shutting down..')
    await app.state.redis.aclose()
    logging.warning('Bye!')


def create_app(use_lifespan: bool = True) -> FastAPI:
    """
    Build the API application.

    Args:
        use_lifespan: Tests pass False and provide app.state.redis themselves
    """
    app = FastAPI(title="Auto Parts Mauritius API", lifespan=lifespan if use_lifespan else None)

    if config.SECURITY_HEADERS_ENABLED:
        app.add_middleware(SecurityHeadersMiddleware)
        logging.info("[Startup] Security headers middleware enabled")

    if config.CSP_ENABLED:
        app.add_middleware(CSPMiddleware)
        logging.info("[Startup] Content Security Policy middleware enabled")

    if config.CORS_ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ALLOWED_ORIGINS,
            allow_credentials=False,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
            allow_headers=["Content-Type", "X-User-Id", "X-Cart-Session"],
        )
        logging.info(f"[Startup] CORS middleware enabled for origins: {config.CORS_ALLOWED_ORIGINS}")
    else:
        logging.debug("[Startup] CORS middleware disabled (no allowed origins configured)")

    install_exception_handlers(app)

    app.include_router(parts_router)
    app.include_router(cart_router)
    app.include_router(orders_router)
    app.include_router(partners_router)
    app.include_router(users_router)
    app.include_router(quotes_router)
    app.include_router(dashboard_router)

    # Health check endpoint (for Docker container monitoring)
    @app.get("/api/health")
    async def health_check():
        return {"status": "healthy"}

    return app
