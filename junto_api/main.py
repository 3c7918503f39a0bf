from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from junto_api import __version__
from junto_api.config.settings import Settings
from junto_api.dao.service import DaoService
from junto_api.exceptions import ConfigurationError, JuntoError
from junto_api.ledger.client import LedgerClient
from junto_api.ledger.keys import Keyring, parse_identity
from junto_api.routers.dao_router import router as dao_router
from junto_api.utils.logger import logger
from junto_api.utils.startup_validation import validate_startup


def build_dao_service(settings: Settings) -> DaoService:
    """Build the ledger client, keyring and DaoService from settings."""
    for var, value in (("PROGRAM_ID", settings.program_id), ("DAO_STATE", settings.dao_state)):
        if not value:
            raise ConfigurationError(f"{var} environment variable is required")

    program_id = parse_identity(settings.program_id)
    dao_state = parse_identity(settings.dao_state)
    keyring = Keyring.from_files(settings.wallet_path, settings.signer_keypair_paths)
    ledger = LedgerClient(settings.rpc_url)
    logger.info(f"Ledger client bound to {settings.rpc_url} (program={program_id}, dao_state={dao_state})")
    return DaoService(ledger, keyring, program_id, dao_state)


def _format_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"Invalid value for {loc}: {first.get('msg')}" if loc else f"Invalid request body: {first.get('msg')}"


def create_app(settings: Optional[Settings] = None, service: Optional[DaoService] = None) -> FastAPI:
    """
    Build the FastAPI application.

    When ``service`` is None the DaoService is built from ``settings`` in
    the startup hook; tests pass a service directly.
    """
    settings = settings or Settings.from_env()
    app = FastAPI(title="Junto DAO API", version=__version__)
    app.state.settings = settings
    app.state.dao_service = service

    if settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )
        logger.info(f"✅ CORS middleware configured for {settings.allowed_origins}")

    @app.exception_handler(JuntoError)
    async def junto_error_handler(request: Request, exc: JuntoError) -> JSONResponse:
        return JSONResponse(status_code=exc.code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _format_validation_error(exc)
        logger.warning(f"Rejected malformed request to {request.url.path}: {message}")
        return JSONResponse(status_code=400, content={"error": message})

    @app.get("/healthz")
    async def healthz() -> dict:
        """Health check with ledger reachability."""
        dao_service = app.state.dao_service
        if dao_service is None:
            return {"status": "error", "ledger": "not initialised"}
        if await dao_service.ping():
            return {"status": "ok", "ledger": "connected"}
        return {"status": "degraded", "ledger": "unreachable"}

    @app.on_event("startup")
    async def startup_event():
        """Initialize services on application startup."""
        if app.state.dao_service is not None:
            return
        logger.info("Junto DAO API starting up...")
        if not validate_startup(settings):
            logger.error("Startup validation failed. Please check configuration.")
        # Keep serving so /healthz reports the failure; DAO routes return 503
        try:
            app.state.dao_service = build_dao_service(settings)
            logger.info("✅ DAO service initialized")
        except JuntoError as e:
            logger.error(f"Failed to initialize DAO service: {e.message}")
            app.state.dao_service = None

    @app.on_event("shutdown")
    async def shutdown_event():
        """Close the ledger connection on shutdown."""
        dao_service = app.state.dao_service
        if dao_service is not None:
            logger.info("Shutting down Junto DAO API...")
            await dao_service.ledger.close()

    app.include_router(dao_router)
    return app


app = create_app()
