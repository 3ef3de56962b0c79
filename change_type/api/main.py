"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .models import ErrorBody, ErrorResponse
from .routes import change_type, types
from ..errors import ChangeTypeError

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Change Type API",
    description="API for moving content items to another content type",
    version="1.0.0",
)

# CORS middleware for the custom element frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["https://app.kontent.ai", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(types.router, prefix="/api/items", tags=["types"])
app.include_router(change_type.router, prefix="/api/items", tags=["change-type"])


@app.exception_handler(ChangeTypeError)
async def change_type_error_handler(request: Request, exc: ChangeTypeError) -> JSONResponse:
    """Render ChangeTypeError and its subclasses as a structured failure."""
    logger.warning(f"{exc.kind} error on {request.url.path}: {exc.message}")

    response = ErrorResponse(error=ErrorBody(**exc.to_dict()))
    return JSONResponse(status_code=exc.status_code, content=response.model_dump())


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render unexpected exceptions without leaking internals."""
    logger.exception(f"Unexpected error on {request.url.path}: {exc}")

    response = ErrorResponse(error=ErrorBody(kind="internal", message="An unexpected error occurred"))
    return JSONResponse(status_code=500, content=response.model_dump())


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
