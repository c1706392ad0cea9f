from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from social_auth.core.config import settings, app_logger
from social_auth.core.exceptions.handlers import (
    configuration_exception_handler,
    exception_schema,
    general_exception_handler,
    oauth_exception_handler,
    user_provisioning_exception_handler,
)
from social_auth.core.exceptions.types import (
    AppException,
    ConfigurationException,
    OAuthException,
    UserProvisioningException,
)
from social_auth.core.routers import auth_router
from social_auth.core.services.oauth import build_network_manager


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_logger.info("Starting application...")

    app_logger.info("Initializing OAuth clients...")
    network_manager = build_network_manager(settings)
    await network_manager.init()
    app.state.network_manager = network_manager
    app_logger.info(
        f"OAuth clients initialized: {', '.join(network_manager.providers())}"
    )

    yield

    app_logger.info("Shutting down application...")

    app_logger.info("Closing OAuth clients...")
    await network_manager.aclose()
    app.state.network_manager = None
    app_logger.info("OAuth clients closed successfully.")


app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=settings.APP_DESCRIPTION,
    debug=settings.DEBUG,
    openapi_url="/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    responses=exception_schema,
)

# Register exception handlers (order matters - more specific first)
app.add_exception_handler(ConfigurationException, configuration_exception_handler)
app.add_exception_handler(OAuthException, oauth_exception_handler)
app.add_exception_handler(
    UserProvisioningException, user_provisioning_exception_handler
)
# Generic fallback
app.add_exception_handler(AppException, general_exception_handler)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middleware for session management
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE_NAME,
    max_age=settings.SESSION_MAX_AGE_SECONDS,
    https_only=not settings.DEBUG,
    same_site=settings.SESSION_SAME_SITE_COOKIE_POLICY,
)

# Include routers
app.include_router(auth_router, prefix="/user", tags=["Social Login"])


@app.get("/", include_in_schema=False)
async def root(request: Request):
    base_url = str(request.base_url).rstrip("/")
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "login": f"{base_url}{settings.LOGIN_URL}",
        "documentations": {
            "swagger": f"{base_url}/docs",
            "redoc": f"{base_url}/redoc",
        },
        "version": settings.APP_VERSION,
    }


@app.head("/health", include_in_schema=False)
@app.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint to verify if the API is running.

    Reports the providers whose OAuth client is configured.
    """
    network_manager = getattr(request.app.state, "network_manager", None)
    providers = {}
    if network_manager is not None:
        for key in network_manager.providers():
            try:
                network_manager.get_sdk(key).config.validate()
                providers[key] = "ok"
            except ConfigurationException:
                providers[key] = "not_configured"

    return {
        "status": "ok",
        "message": f"{settings.APP_NAME} is running.",
        "providers": providers,
    }
