"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.agent.llm import ChatModelGenerator, get_llm
from app.api.errors import register_exception_handlers
from app.api.routes import auth, roadmaps
from app.core.config import Settings, get_settings
from app.core.database import close_db, create_engine, create_session_factory, init_db
from app.core.logging import configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    # Startup
    configure_logging(debug=settings.DEBUG)
    logger.info(
        "Starting SkillRoad",
        version=settings.APP_VERSION,
        env=settings.ENV,
        debug=settings.DEBUG,
    )
    await init_db(app.state.engine)
    if getattr(app.state, "text_generator", None) is None:
        app.state.text_generator = ChatModelGenerator(get_llm(settings))
    yield
    # Shutdown
    logger.info("Shutting down SkillRoad")
    await close_db(app.state.engine)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around one explicit ``Settings`` instance."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="AI-generated learning roadmaps with progress tracking",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = create_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.text_generator = None

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else settings.CORS_ORIGINS,
        allow_credentials=not settings.is_development,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(auth.router, prefix=settings.API_PREFIX)
    app.include_router(roadmaps.router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "env": settings.ENV,
        }

    @app.get("/")
    async def root() -> dict:
        """Root endpoint."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs",
        }

    return app


app = create_app()
