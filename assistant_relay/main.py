"""FastAPI main application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .config import Settings, settings
from .auth import TokenVerifier
from .db import DatabaseConnection, ConversationRepository, MessageRepository
from .services import ConversationOrchestrator, RunPoller, ThreadClient, build_profiles
from .utils.logger import init_app_logger, mask_secret
from .api.v1 import assistants, conversations


# Initialize logger
logger = init_app_logger(settings)


def wire_app(app: FastAPI, config: Settings) -> None:
    """
    Build the service components from settings and attach them to app.state.

    Args:
        app: FastAPI application instance
        config: Application settings
    """
    db_conn = DatabaseConnection(config.database_path)
    thread_client = ThreadClient(
        api_key=config.openai_api_key,
        base_url=config.openai_api_base,
        beta=config.openai_beta,
        timeout=config.openai_timeout
    )
    poller = RunPoller(
        thread_client,
        interval=config.run_poll_interval,
        max_attempts=config.run_poll_max_attempts
    )

    app.state.db_conn = db_conn
    app.state.thread_client = thread_client
    app.state.token_verifier = TokenVerifier(
        secret=config.jwt_secret,
        audience=config.jwt_audience,
        algorithms=config.get_jwt_algorithms()
    )
    app.state.orchestrator = ConversationOrchestrator(
        conversations=ConversationRepository(db_conn.conn),
        messages=MessageRepository(db_conn.conn),
        thread_client=thread_client,
        poller=poller,
        profiles=build_profiles(config)
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    logger.info("=" * 70)
    logger.info("Starting Assistant Relay...")
    logger.info("=" * 70)

    logger.info("")
    logger.info("📡 Server Configuration:")
    logger.info(f"  Host: {settings.host}")
    logger.info(f"  Port: {settings.port}")
    logger.info(f"  Debug: {settings.debug}")
    logger.info(f"  Log Level: {settings.log_level}")
    logger.info(f"  Log File: {settings.log_file}")
    logger.info(f"  Database: {settings.database_path}")

    logger.info("")
    logger.info("🤖 Assistant Configuration:")
    logger.info(f"  API Base: {settings.openai_api_base}")
    logger.info(f"  API Key: {mask_secret(settings.openai_api_key)}")
    logger.info(f"  Health Coach Assistant: {settings.health_coach_assistant_id or 'Not set'}")
    logger.info(f"  Excursion Creator Assistant: {settings.excursion_creator_assistant_id or 'Not set'}")
    logger.info(f"  Run Polling: every {settings.run_poll_interval}s, max {settings.run_poll_max_attempts} checks")
    logger.info(f"  JWT Secret: {mask_secret(settings.jwt_secret)}")

    # Missing values are reported per request, not at startup
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; chat requests will fail until it is configured")
    if not settings.jwt_secret:
        logger.warning("JWT_SECRET is not set; authenticated requests will fail until it is configured")

    wire_app(app, settings)

    logger.info("")
    logger.info("=" * 70)
    logger.info("✅ Assistant Relay started successfully!")
    logger.info(f"📍 Access at: http://{settings.host}:{settings.port}")
    logger.info(f"📚 API Docs: http://{settings.host}:{settings.port}/docs")
    logger.info("=" * 70)

    yield

    logger.info("")
    logger.info("Shutting down Assistant Relay...")
    await app.state.thread_client.aclose()
    app.state.db_conn.close()
    logger.info("✅ Assistant Relay shut down successfully")


# Create FastAPI application
app = FastAPI(
    title="Assistant Relay",
    description="Relays mobile chat turns to remote assistants and keeps the conversation history",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(assistants.router)
app.include_router(conversations.router)


@app.get("/health")
async def health():
    """
    Simple health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": "Assistant Relay",
        "version": "1.0.0"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "assistant_relay.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
