#!/usr/bin/env python3
"""
HTTP Transport

FastAPI application exposing the memory tools over JSON-RPC at
POST /message, plus health and catalog endpoints.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, configure_logging
from .protocol import INTERNAL_ERROR
from .service import MemoryService, create_service

logger = logging.getLogger(__name__)


def _status_for(response: dict) -> int:
    error = response.get("error")
    if error and error.get("code") == INTERNAL_ERROR:
        return 500
    return 200


def create_app(service: Optional[MemoryService] = None) -> FastAPI:
    """Build the FastAPI app around a service (a fresh one if not given)."""
    service = service or create_service()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        names = service.registry.names()
        logger.info(f"Memory server starting with {len(names)} tools")
        for name in names:
            logger.info(f"  - {name}")

        yield

        logger.info("Memory server shutting down")

    app = FastAPI(
        title="Memory Server",
        description="JSON-RPC tool server backed by a volatile memory store",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.service = service

    # ============== API Endpoints ==============

    @app.get("/")
    async def root():
        return {
            "service": "Memory Server",
            "version": __version__,
            "tools_count": len(service.registry),
            "endpoints": {
                "message": "/message",
                "list_tools": "/tools",
                "memories": "/memories",
                "health": "/health",
            },
        }

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "tools_loaded": len(service.registry),
            "memories": len(service.store),
        }

    @app.get("/tools")
    async def list_tools():
        definitions = service.registry.definitions()
        return {
            "total": len(definitions),
            "tools": [
                {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": [
                        {
                            "name": p.name,
                            "type": p.type,
                            "description": p.description,
                            "required": p.required,
                        }
                        for p in tool.parameters
                    ],
                }
                for tool in definitions
            ],
        }

    @app.get("/memories")
    async def list_memories():
        """Read-only dump of the store, most recent first."""
        memories = service.store.list_all()
        return {
            "total": len(memories),
            "memories": [m.to_dict() for m in memories],
        }

    @app.post("/message")
    async def message(request: Request):
        body = await request.body()
        response = await service.protocol.handle_raw(body)

        if response is None:
            return Response(status_code=204)
        return JSONResponse(content=response, status_code=_status_for(response))

    return app


def main(settings: Optional[Settings] = None):
    """Entry point: serve the HTTP transport with uvicorn."""
    import uvicorn

    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = create_app()
    logger.info(f"Starting memory server on {settings.host}:{settings.port} (log level {settings.log_level})")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.replace("warn", "warning"))


if __name__ == "__main__":
    main()
