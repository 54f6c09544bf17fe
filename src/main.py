from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.router import router
from src.config import settings
from src.core.exceptions import AppError
from src.core.logging import configure_logging
from src.services import style_transfer

configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("app_started", app_name=settings.app_name)
    yield
    await style_transfer.close_client()
    logger.info("app_stopped", app_name=settings.app_name)


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [{"loc": e["loc"], "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": errors})


@app.exception_handler(httpx.HTTPStatusError)
async def upstream_status_error_handler(request: Request, exc: httpx.HTTPStatusError) -> JSONResponse:
    logger.error("upstream_request_failed", status_code=exc.response.status_code, error=str(exc))
    return JSONResponse(
        status_code=502,
        content={"detail": f"Upstream model request failed with status {exc.response.status_code}"},
    )


@app.exception_handler(httpx.TransportError)
async def upstream_transport_error_handler(request: Request, exc: httpx.TransportError) -> JSONResponse:
    logger.error("upstream_request_failed", error=str(exc))
    return JSONResponse(status_code=502, content={"detail": "Upstream model request failed"})


app.include_router(router)


def run() -> None:
    uvicorn.run("src.main:app", host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    run()
