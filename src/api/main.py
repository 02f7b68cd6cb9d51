"""
FastAPI application for the shopping assistant API.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import AppConfig

from .deps import build_service
from .routes import router


def configure_logging(config: AppConfig) -> None:
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# from_env loads .env first, so LOG_LEVEL set there applies.
config = AppConfig.from_env()
configure_logging(config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the catalog and build the agent on startup; release HTTP clients on shutdown."""
    service = build_service(config)
    app.state.service = service
    yield
    service.close()


app = FastAPI(
    title="Shop Assistant API",
    description="Chatbot that searches the product catalog and converts currencies using function calling",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
app.include_router(router)
