"""
Main Application Entry Point.

This module builds the FastAPI application: it wires the service container,
configures middleware (request logging, CORS, signed-cookie sessions),
includes the health endpoints and mounts the ``IslamRouter`` that serves the
wiki pages and JSON endpoints.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from starlette.middleware.sessions import SessionMiddleware

from islamwiki.core.configuration import ConfigurationManager, seed_defaults
from islamwiki.core.container import Container
from islamwiki.core.database import create_all, create_engine, create_sessionmaker
from islamwiki.core.logging_config import get_logger, setup_logging
from islamwiki.extensions import ExtensionManager, HookManager
from islamwiki.http.middleware import AuthenticationMiddleware, RequestLoggingMiddleware
from islamwiki.routes import register_routes
from islamwiki.routing import ROUTES_REGISTER_HOOK, IslamRouter

from .api.v1 import health
from .core import constant
from .core.config import Settings
from .exception_handlers import setup_exception_handlers

# Initialize logging
setup_logging()
logger = get_logger(__name__)

SESSION_FACTORY = "db.session_factory"


def build_container(settings: Settings, session_factory: async_sessionmaker[AsyncSession]) -> Container:
    """
    Register the application services.

    Args:
        settings: Application settings
        session_factory: Async session factory for the configuration database

    Returns:
        The populated container
    """
    container = Container()
    container.instance(Settings, settings)
    container.instance(SESSION_FACTORY, session_factory)
    container.singleton(HookManager, lambda c: HookManager())
    container.singleton(ConfigurationManager, lambda c: ConfigurationManager(c.get(SESSION_FACTORY), c.get(HookManager)))
    container.singleton(ExtensionManager, lambda c: ExtensionManager(c))
    container.singleton(IslamRouter, lambda c: IslamRouter(c))
    container.singleton(AuthenticationMiddleware, lambda c: AuthenticationMiddleware())
    container.alias(HookManager, "hooks")
    container.alias(ConfigurationManager, "config")
    container.alias(ExtensionManager, "extensions")
    container.alias(IslamRouter, "router")
    return container


async def _bootstrap(app: FastAPI, engine: AsyncEngine) -> None:
    container: Container = app.state.container
    settings: Settings = container.get(Settings)

    try:
        logger.info(f"Starting up {settings.app_name} ({settings.environment})...")
        await create_all(engine)
        await seed_defaults(container.get(SESSION_FACTORY))
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    await container.get(ConfigurationManager).load_configuration()
    container.get(ExtensionManager).load_extensions()

    if not app.state.extension_routes_registered:
        await container.get(HookManager).run_async(ROUTES_REGISTER_HOOK, container.get(IslamRouter))
        app.state.extension_routes_registered = True


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the IslamWiki application.

    Args:
        settings: Application settings; read from the environment when omitted

    Returns:
        The configured FastAPI application
    """
    settings = settings or Settings()
    engine = create_engine(settings.database_url)
    session_factory = create_sessionmaker(engine)
    container = build_container(settings, session_factory)

    router: IslamRouter = container.get(IslamRouter)
    register_routes(router)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application lifespan events.

        Startup creates and seeds the configuration tables, loads the
        configuration and the extensions and lets extensions register routes.
        """
        await _bootstrap(app, engine)

        yield

        logger.info(f"Shutting down {settings.app_name}...")
        await engine.dispose()

    app = FastAPI(
        title=constant.PROJECT_NAME,
        description="""
        IslamWiki Server

        A wiki for Islamic knowledge content with a hook-based extension system
        and database-backed configuration.
        """,
        version=constant.VERSION,
        openapi_url=f"{constant.API_V1_STR}/openapi.json",
        docs_url=f"{constant.API_V1_STR}/docs",
        redoc_url=f"{constant.API_V1_STR}/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.container = container
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.extension_routes_registered = False

    session = settings.session
    app.add_middleware(
        SessionMiddleware,
        secret_key=session.secret_key,
        session_cookie=session.name,
        max_age=session.lifetime,
        path=session.path,
        same_site=session.same_site,
        https_only=session.https_only,
    )

    cors = settings.cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestLoggingMiddleware)

    setup_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    # Mounted last: the wiki router answers every path not handled above.
    app.mount("/", router, name="wiki")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app.state.settings.server_host, port=app.state.settings.server_port)
