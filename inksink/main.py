"""FastAPI application for the InkSink chat API.

This module provides the main FastAPI application with:
- Lifespan management for Key Vault secrets, models and database connections
- CORS middleware
- Route registration
- ApiError rendering as {"error": message}
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .agents.model_registry import ModelRegistry
from .config import get_settings
from .core.errors import ApiError
from .infrastructure import AKV, AsyncChatStore, CreditService
from .routes import chat, chat_title, chats, user

# Secrets the app cannot start without
REQUIRED_SECRETS = [
    "POSTGRES-ADMIN-PASSWORD",
    "AZURE-OPENAI-API-KEY",
]

# Secrets that only enable the Redis cache
OPTIONAL_SECRETS = [
    "REDIS-PASSWORD",
]

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan.

    Loads secrets and the model registry, opens the PostgreSQL pool (plus
    Redis cache when enabled) on startup and closes them on shutdown.
    """
    app_settings = get_settings()
    logger.info(f"Starting application with mode: {app_settings.chat_history_mode}")

    akv = AKV(vault_name=app_settings.key_vault_name)
    akv.load_secrets(
        REQUIRED_SECRETS,
        optional=OPTIONAL_SECRETS if app_settings.use_redis else (),
    )
    app.state.keyvault = akv
    app.state.model_registry = ModelRegistry(akv)

    postgres_password = akv.get_secret("POSTGRES-ADMIN-PASSWORD")
    postgres_connection_string = app_settings.get_postgres_connection_string(postgres_password)

    chat_store = AsyncChatStore()
    if app_settings.use_redis and akv.has_secret("REDIS-PASSWORD"):
        await chat_store.initialize(
            postgres_connection_string=postgres_connection_string,
            redis_host=app_settings.redis_host,
            redis_password=akv.get_secret("REDIS-PASSWORD"),
            redis_port=app_settings.redis_port,
            redis_ssl=app_settings.redis_ssl,
            redis_ttl=app_settings.redis_ttl_seconds,
        )
        logger.info("Initialized with PostgreSQL + Redis write-through cache")
    else:
        await chat_store.initialize(postgres_connection_string=postgres_connection_string)
        logger.info("Initialized with PostgreSQL only")

    # Store in app state for dependency injection
    app.state.chat_store = chat_store
    app.state.credit_service = CreditService(chat_store.backend, cost=app_settings.credits_per_message)

    yield

    # Cleanup on shutdown
    logger.info("Shutting down application")
    await chat_store.close()


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="InkSink Chat API",
        description="Intent-routed writing assistant with SSE streaming",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, api_error_handler)

    # Include routers
    app.include_router(user.router, prefix="/api", tags=["user"])
    app.include_router(chat.router, prefix="/api", tags=["chat"])
    app.include_router(chat_title.router, prefix="/api", tags=["chat"])
    app.include_router(chats.router, prefix="/api", tags=["chats"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


# Create the app instance
app = create_app()
