"""
Helpdesk Ticketing - Main Application
=====================================

Support ticket service with keyword-based categorization, automatic agent
assignment and role-scoped access.

Modules:
- Auth: Signup, login, bearer tokens
- Tickets: Categorization, assignment, lifecycle, statistics

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities, categorization rules, access policy
- Infrastructure: Database, LLM
"""

import random
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configuration and Core
from helpdesk.config import get_settings
from helpdesk.core import ConfigurationException

# Infrastructure
from helpdesk.infrastructure.database import Database
from helpdesk.infrastructure.llm import build_llm_client

# Module Routers
from helpdesk.auth.interfaces import auth_router
from helpdesk.tickets.interfaces import tickets_router

# Shared
from helpdesk.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    register_exception_handlers,
)
from helpdesk.shared.infrastructure.logging import setup_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Refuse to start without a token signing secret
    3. Open the database and create tables
    4. Build the LLM client (if configured) and the random source

    SHUTDOWN:
    1. Close the LLM client
    2. Close database connections
    """
    settings = get_settings()

    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting Helpdesk API", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    if not settings.jwt_secret:
        logger.error("JWT_SECRET is not set")
        raise ConfigurationException("JWT_SECRET must be set")

    logger.info("Initializing database")
    database = Database.from_settings(settings)
    # For development - production schemas are managed with migrations
    await database.create_tables()

    llm_client = build_llm_client(settings)
    if llm_client is None:
        logger.info("LLM client not configured - categorization stays local")

    app.state.database = database
    app.state.llm_client = llm_client
    app.state.rng = random.Random()

    logger.info("Helpdesk API started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down Helpdesk API")

    if llm_client is not None:
        await llm_client.close()
    await database.close()

    logger.info("Helpdesk API shutdown complete")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Helpdesk Ticketing API",
        description="""
    ## Helpdesk Ticketing

    **Auth** - `POST /api/auth/signup`, `POST /api/auth/login`, `GET /api/auth/profile`

    **Tickets** - create, list, stats, get, update and delete under `/api/tickets`.
    New tickets are categorized from their text and assigned to a random agent.
    Agents only see and update tickets assigned to them; admins see everything.

    All responses share one envelope: `{success, message?, data?, errors?}`.
    """,
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # === CORS Middleware ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # === Custom Middleware (from shared) ===
    # Last added runs first: the correlation ID must exist before logging
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(CorrelationIDMiddleware)
    register_exception_handlers(app)

    # === Include Module Routers ===
    app.include_router(auth_router)
    app.include_router(tickets_router)

    # === Health Check Endpoint ===

    @app.get("/health", tags=["Health"], responses={
        200: {
            "description": "Service is up",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "message": "Helpdesk API is running",
                        "timestamp": "2024-01-15T10:00:00+00:00",
                        "version": "1.0.0"
                    }
                }
            }
        }
    })
    async def health_check():
        """Liveness probe for load balancers and orchestrators."""
        return {
            "success": True,
            "message": "Helpdesk API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.app_version,
        }

    return app


app = create_app()


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "helpdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower()
    )
