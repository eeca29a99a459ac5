"""
FastAPI application for the document rendering service.

Provides REST API endpoints for rendering business documents to PDF with
error handling, logging, and health checks.

License: MIT
"""

import asyncio
import base64
import logging
import time
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from docpress import config
from docpress.assets import resolve_assets
from docpress.errors import ThemeError
from docpress.models import DocumentRenderRequest
from docpress.pdf_backend import render_document_with_count

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format=config.LOG_FORMAT
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="docpress",
    version="1.0.0",
    description="Typesetting and pagination engine for proposals, contracts and SLAs",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing information."""
    start_time = time.time()

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} "
        f"completed in {duration:.3f}s with status {response.status_code}"
    )

    return response


def _filename(document: DocumentRenderRequest) -> str:
    return f"{document.document.number()}.pdf"


async def _render_request(payload: Dict[str, Any]):
    """Validate, resolve assets and render off the event loop."""
    start_time = time.time()
    document = DocumentRenderRequest.model_validate(payload)
    # Blocking work runs in worker threads
    document = await asyncio.to_thread(resolve_assets, document)
    pdf_bytes, page_count = await asyncio.to_thread(render_document_with_count, document)
    render_time = time.time() - start_time
    logger.info(
        f"Rendered {document.document.document_type} '{document.document.title}' "
        f"({len(document.sections)} sections, {page_count} pages) in {render_time:.3f}s"
    )
    return document, pdf_bytes, page_count, render_time


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Status dictionary indicating service health
    """
    return {"status": "ok"}


@app.post("/render")
async def render_pdf(payload: Dict[str, Any]) -> Response:
    """
    Render a document to PDF.

    Args:
        payload: Render request as JSON

    Returns:
        PDF file as binary response

    Raises:
        HTTPException: On validation or rendering errors
    """
    try:
        document, pdf_bytes, page_count, render_time = await _render_request(payload)

        return Response(
            content=pdf_bytes,
            media_type="application/pdf",
            headers={
                "Content-Disposition": f'attachment; filename="{_filename(document)}"',
                "X-Render-Time": f"{render_time:.3f}",
                "X-Page-Count": str(page_count),
            }
        )

    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        raise HTTPException(status_code=400, detail=f"Validation error: {str(e)}")

    except ThemeError as e:
        logger.error(f"Theme error: {str(e)}")
        raise HTTPException(status_code=400, detail=f"Theme error: {str(e)}")

    except ValueError as e:
        logger.error(f"Value error: {str(e)}")
        raise HTTPException(status_code=400, detail=f"Validation error: {str(e)}")

    except Exception as e:
        logger.error(f"Rendering error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Rendering error: {str(e)}")


@app.post("/render-base64")
async def render_pdf_base64(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Render a document to PDF and return it base64-encoded.

    Args:
        payload: Render request as JSON

    Returns:
        JSON with base64-encoded PDF

    Raises:
        HTTPException: On validation or rendering errors
    """
    try:
        document, pdf_bytes, page_count, render_time = await _render_request(payload)

        return {
            "success": True,
            "pdf_base64": base64.b64encode(pdf_bytes).decode("ascii"),
            "filename": _filename(document),
            "page_count": page_count,
            "size_bytes": len(pdf_bytes),
            "render_time_seconds": round(render_time, 3),
        }

    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        raise HTTPException(status_code=400, detail=f"Validation error: {str(e)}")

    except ThemeError as e:
        logger.error(f"Theme error: {str(e)}")
        raise HTTPException(status_code=400, detail=f"Theme error: {str(e)}")

    except ValueError as e:
        logger.error(f"Value error: {str(e)}")
        raise HTTPException(status_code=400, detail=f"Validation error: {str(e)}")

    except Exception as e:
        logger.error(f"Rendering error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Rendering error: {str(e)}")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "detail": str(exc)}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
