"""
Main application entry point.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1 import dependencies
from app.api.v1.book_endpoints import router as book_router
from app.infrastructure.kv import StorageError, StoreInitializationError

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8080"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Opening the store is the only startup step; failure aborts startup
    try:
        dependencies.get_book_repository().initialize()
    except StoreInitializationError as e:
        logger.error(f"Cannot initialize storage: {e}")
        raise
    logger.info(f"Library catalog ready (store: {dependencies.get_store().path})")
    try:
        yield
    finally:
        dependencies.reset_dependencies()


app = FastAPI(
    title="Library Catalog API",
    description="Create, list, search and delete books grouped by genre.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(book_router, tags=["books"])


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    ]
    return PlainTextResponse(
        "Invalid request: " + "; ".join(messages),
        status_code=400,
    )


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return PlainTextResponse(str(exc), status_code=500)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=API_HOST, port=API_PORT)
