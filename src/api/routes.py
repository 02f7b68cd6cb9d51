"""
API routes: chat, search, health.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.catalog import MAX_RESULTS
from src.errors import (
    ConfigurationError,
    QueryProcessingError,
    QueryTimeoutError,
    ValidationError,
)

from .deps import ServiceState
from .models import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    ProductHit,
    SearchRequest,
    SearchResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chatbot"])


def _get_service(request: Request) -> Optional[ServiceState]:
    return getattr(request.app.state, "service", None)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"statusCode": status_code, "message": message})


def error_response(exc: Exception) -> JSONResponse:
    """Map a (possibly wrapped) service error to an HTTP response."""
    cause = exc.cause if isinstance(exc, QueryProcessingError) and exc.cause is not None else exc
    if isinstance(cause, ValidationError):
        return _error(400, str(cause))
    if isinstance(cause, ConfigurationError):
        return _error(503, "Service configuration error. Please check API keys.")
    if isinstance(cause, QueryTimeoutError):
        return _error(504, str(cause))
    return _error(500, "An error occurred while processing your request.")


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Health check."""
    service = _get_service(request)
    if service is None:
        return HealthResponse(status="starting")
    return HealthResponse(
        status="ok",
        products_loaded=len(service.product_index),
        currency_enabled=service.converter.enabled,
    )


@router.post("/chat", response_model=ChatResponse)
async def chat(request: Request, body: ChatRequest) -> ChatResponse | JSONResponse:
    """Send a query to the chatbot; it may search products or convert currencies."""
    service = _get_service(request)
    if service is None or service.agent is None:
        return _error(503, "Service configuration error. Please check API keys.")
    timeout = service.config.request_timeout_s
    try:
        answer = await asyncio.wait_for(
            asyncio.to_thread(service.agent.process_query, body.query),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.error("Query timed out after %ss", timeout)
        return error_response(QueryTimeoutError(f"Request timed out after {timeout:g} seconds"))
    except (ValidationError, QueryProcessingError) as e:
        return error_response(e)
    return ChatResponse(response=answer)


@router.post("/search", response_model=SearchResponse)
async def search_endpoint(request: Request, body: SearchRequest) -> SearchResponse | JSONResponse:
    """Direct catalog search (no oracle)."""
    service = _get_service(request)
    if service is None:
        return _error(503, "Service unavailable: catalog not loaded.")
    scored = service.product_index.score_all(body.query)
    hits = [
        ProductHit(
            title=s.entry.title,
            price=s.entry.price,
            url=s.entry.url,
            image_url=s.entry.image_url,
            category=s.entry.category,
            variants=s.entry.variants,
            score=s.score,
        )
        for s in scored[:MAX_RESULTS]
    ]
    return SearchResponse(query=body.query, results=hits)
