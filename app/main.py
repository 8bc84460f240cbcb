# app/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, and all routers.
The DB engine and the Firebase app are created on startup and released on shutdown.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import auth, vehicles, jobs, health
from app.database import create_db_engine, create_tables, make_session_factory
from app.config import Settings, settings as default_settings
from app.services.exceptions import LedgerError
from app.services.identity_service import FirebaseIdentityResolver
from app.utils.logger import get_logger
import time
import uvicorn

logger = get_logger(__name__)

OPEN_PATHS = {"/auth/firebase", "/health", "/docs", "/redoc", "/openapi.json"}


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth for resource endpoints.
    Login and health check are excluded. Set API_KEY in .env; leave empty to disable.
    """
    def __init__(self, app, api_key: str):
        super().__init__(app)
        self.api_key = api_key

    async def dispatch(self, request: Request, call_next):
        if request.url.path in OPEN_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        api_key = request.headers.get("X-API-Key")
        if api_key != self.api_key:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"error": "Invalid or missing API key"},
            )
        return await call_next(request)


def create_app(settings: Settings = default_settings) -> FastAPI:
    app = FastAPI(
        title="Maintenance Ledger API",
        description="Vehicles, maintenance jobs and the parts used by each job.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # ── API key (inner) + CORS (outer, so preflights never hit the key check) ─
    if settings.API_KEY:
        app.add_middleware(APIKeyMiddleware, api_key=settings.API_KEY)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Request Timing Middleware ────────────────────────────────────────────
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = round((time.time() - start) * 1000, 2)
        logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
        return response

    # ── Exception Handlers ───────────────────────────────────────────────────
    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        messages = []
        for error in exc.errors():
            field = ".".join(str(x) for x in error.get("loc", []) if x != "body")
            messages.append(f"{field}: {error.get('msg', 'Invalid value')}")
        logger.warning(f"Validation error on {request.method} {request.url.path}: {messages}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": " | ".join(messages) or "Invalid request"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    # ── Routers ──────────────────────────────────────────────────────────────
    app.include_router(auth.router,     tags=["Auth"])
    app.include_router(vehicles.router, tags=["Vehicles"])
    app.include_router(jobs.router,     tags=["Jobs"])
    app.include_router(health.router,   tags=["Health"])

    # ── Startup / Shutdown ───────────────────────────────────────────────────
    @app.on_event("startup")
    async def startup():
        logger.info("Maintenance Ledger starting up...")
        engine = create_db_engine(settings)
        app.state.engine = engine
        app.state.session_factory = make_session_factory(engine)
        create_tables(engine)
        logger.info("Database tables ready")
        app.state.identity_resolver = FirebaseIdentityResolver.from_settings(settings)
        logger.info("Startup complete")

    @app.on_event("shutdown")
    async def shutdown():
        logger.info("Maintenance Ledger shutting down...")
        resolver = getattr(app.state, "identity_resolver", None)
        if resolver is not None:
            resolver.close()
        engine = getattr(app.state, "engine", None)
        if engine is not None:
            engine.dispose()
            logger.info("Database pool closed")

    return app


app = create_app()


if __name__ == "__main__":
    logger.info(f"Server running on port {default_settings.PORT}")
    uvicorn.run(app, host="0.0.0.0", port=default_settings.PORT)
