"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from svg2pdc import __version__
from svg2pdc.config import settings
from svg2pdc.errors import ConversionError, DocumentError, PdcDecodeError

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="svg2pdc",
        description="SVG → Pebble draw command image converter",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    from svg2pdc.api.router import api_router

    app.include_router(api_router)

    return app


def _register_error_handlers(app: FastAPI) -> None:
    """Map conversion failures onto 422 responses with a machine-readable kind."""

    @app.exception_handler(ConversionError)
    async def _conversion_error(request: Request, exc: ConversionError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"error": exc.kind, "message": exc.message, "element_id": exc.element_id},
        )

    @app.exception_handler(DocumentError)
    async def _document_error(request: Request, exc: DocumentError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"error": "DocumentError", "message": str(exc), "element_id": None},
        )

    @app.exception_handler(PdcDecodeError)
    async def _decode_error(request: Request, exc: PdcDecodeError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"error": "PdcDecodeError", "message": str(exc), "element_id": None},
        )


app = create_app()
