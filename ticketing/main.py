import time
from dotenv import load_dotenv

# Load environment variables from .env file before anything else
load_dotenv()

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from ticketing.core.config import settings
from ticketing.core.logging import setup_logging, request_id_ctx
from ticketing.core.errors import NotFoundError, ValidationError, AuthenticationError
from ticketing.api.router import api_router
from ticketing.core.db import init_models

setup_logging()
app = FastAPI(title=settings.APP_NAME)

logger = logging.getLogger(__name__)

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id", "-")
    token = request_id_ctx.set(rid)
    try:
        response = await call_next(request)
    finally:
        request_id_ctx.reset(token)
    if rid != "-":
        response.headers["x-request-id"] = rid
    return response

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = (time.time() - start_time) * 1000
    formatted_process_time = f"{process_time:.2f}ms"

    logger.info(
        f"Request: {request.method} {request.url.path} - Response: {response.status_code} - Time: {formatted_process_time}"
    )

    return response

# domain error -> HTTP status; message is passed through to the caller
_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (ValidationError, 400),
    (AuthenticationError, 401),
)

def _app_error_handler(status_code: int):
    async def handler(request: Request, exc):
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, status_code, exc.message)
        return JSONResponse(status_code=status_code, content={"message": exc.message})
    return handler

for error_cls, status_code in _STATUS_BY_ERROR:
    app.add_exception_handler(error_cls, _app_error_handler(status_code))

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg')}" if field else (first.get("msg") or "Invalid request")
    return JSONResponse(status_code=400, content={"message": message})

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled exception for request {request.method} {request.url.path}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "An internal server error occurred."},
    )

@app.on_event("startup")
async def on_startup():
    await init_models()

app.include_router(api_router, prefix=settings.API_PREFIX)
