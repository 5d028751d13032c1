import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from streamify.api.api_v1 import api_router
from streamify.core.config import settings
from streamify.core.errors import AppError, ErrorCode
from streamify.core.log_config import setup_logging
from streamify.db.database import close_db, connect_db
from streamify.schemas.response import send_error
from streamify.services.chat import chat_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await connect_db()
    yield
    await chat_service.close()
    await close_db()


app = FastAPI(
    title="Streamify Backend",
    version="1.0.0",
    description="Language exchange API (FastAPI + MongoDB + Stream)",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return send_error(exc.message, exc.status_code, exc.error_code, exc.details)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in e["loc"][1:]), "message": e["msg"]}
        for e in exc.errors()
    ]
    return send_error(
        "Validation failed",
        status.HTTP_400_BAD_REQUEST,
        ErrorCode.VALIDATION_ERROR,
        {"errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return send_error(
        "Internal Server Error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.INTERNAL_SERVER_ERROR,
    )


app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "hello checking backend"}
