"""
Request and response models for the shopping assistant API.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Request body for POST /api/chat."""

    query: str = Field(
        ...,
        description="The user enquiry or question; blank text is rejected with 400",
        examples=["I am looking for a phone"],
    )


class ChatResponse(BaseModel):
    """Response for POST /api/chat."""

    response: str = Field(..., description="The final response from the chatbot")


class SearchRequest(BaseModel):
    """Request body for POST /api/search."""

    query: str = Field(..., min_length=1)


class ProductHit(BaseModel):
    """Single catalog search result."""

    title: str
    price: str = ""
    url: str = ""
    image_url: str = ""
    category: str = ""
    variants: str = ""
    score: int = 0


class SearchResponse(BaseModel):
    """Response for POST /api/search."""

    query: str
    results: List[ProductHit] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    status: str = "ok"
    products_loaded: int = 0
    currency_enabled: bool = False
