import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from fichiers.core.errors import FichiersError

logger = logging.getLogger("fichiers")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(FichiersError)
    async def fichiers_error_handler(request: Request, exc: FichiersError):
        if exc.status_code >= 500:
            logger.error("event=request_failed path=%s error=%s", request.url.path, exc.message)
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # Unsupported conversion formats and missing parameters are client errors.
        logger.warning("event=request_rejected path=%s errors=%s", request.url.path, exc.errors())
        return JSONResponse({"detail": jsonable_errors(exc)}, status_code=400)


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
