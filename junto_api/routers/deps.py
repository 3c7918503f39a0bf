# Shared FastAPI router dependencies

from fastapi import Request

from junto_api.dao.service import DaoService
from junto_api.exceptions import ServiceUnavailableError
from junto_api.utils.logger import logger


def get_dao_service(request: Request) -> DaoService:
    """Return the DaoService built at startup (or injected by tests)."""
    service = getattr(request.app.state, "dao_service", None)
    if service is None:
        logger.error("Router: DAO service requested before initialisation")
        raise ServiceUnavailableError("DAO service is not initialised")
    return service
