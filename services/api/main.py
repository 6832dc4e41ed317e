"""
Submittal Packet API
FastAPI backend that manages product documents and assembles them into a
single submittal packet PDF through the remote PDF worker.

Install dependencies:
pip install -e .

Run server:
uvicorn main:app --host 0.0.0.0 --port 8000
"""

import contextvars
import logging
import os
import time
import uuid
from typing import Optional

import httpx
from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from adapters.base import DocumentStore
from core.file_storage import FILES_ROUTE, LocalFileStorage
from routers import documents as documents_router
from routers import packets as packets_router
from settings import Settings, get_settings

# ========== Request Context for Tracing ==========
request_id_var = contextvars.ContextVar('request_id', default=None)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

VERSION = "1.0"

# ============================================================================
# STORAGE ADAPTER INITIALIZATION
# ============================================================================

def build_document_store(settings: Settings) -> DocumentStore:
    backend = settings.storage_backend.lower()
    logger.info(f"🔧 Storage Backend: {backend.upper()}")

    if backend == "sqlite":
        from adapters.sqlite import SqliteDocumentStore
        return SqliteDocumentStore.from_url(settings.db_url)
    if backend == "json":
        from adapters.json import JsonDocumentStore
        return JsonDocumentStore(settings.json_data_dir)

    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.storage_backend}")

# ============================================================================
# FASTAPI APP
# ============================================================================

def create_app(
    settings: Optional[Settings] = None,
    document_store: Optional[DocumentStore] = None,
    file_storage: Optional[LocalFileStorage] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Build the application. Anything not passed in is created from settings
    on startup (tests pass their own store/client).
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Submittal Packet API",
        description="Document catalog and submittal packet generation",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.document_store = document_store
    app.state.file_storage = file_storage
    app.state.http_client = http_client

    # ========== Request Tracing Middleware ==========
    @app.middleware("http")
    async def request_tracing_middleware(request, call_next):
        """Add request_id and timing to all requests."""
        request_id = uuid.uuid4().hex[:8]
        request_id_var.set(request_id)
        started = time.time()

        response = await call_next(request)

        latency = time.time() - started
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({round(latency * 1000, 2)} ms) [{request_id}]"
        )
        response.headers["X-Request-ID"] = request_id
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_origins_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"}
        )

    # ========== Health ==========

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        try:
            store = app.state.document_store
            if store is None:
                raise RuntimeError("document store not initialized")
            count = len(store.list_documents())
            return {
                "status": "healthy",
                "backend": settings.storage_backend,
                "documents": count,
                "renderer": settings.renderer_base_url,
                "version": VERSION,
            }
        except Exception as e:
            logger.error(f"Health check failed: {str(e)}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unhealthy", "backend": settings.storage_backend, "error": str(e)}
            )

    @app.get("/healthz")
    async def healthz():
        """
        Liveness probe. Returns 200 while the process is up.
        """
        return {"status": "ok", "timestamp": time.time(), "version": VERSION}

    @app.get("/")
    async def root():
        """API root endpoint"""
        return {
            "message": "Submittal Packet API",
            "version": VERSION,
            "backend": settings.storage_backend,
            "status": "running",
            "docs": "/docs",
        }

    app.include_router(documents_router.router)
    app.include_router(packets_router.router)

    # Uploaded PDFs (Document.url points here)
    app.mount(
        FILES_ROUTE,
        StaticFiles(
            directory=str(file_storage.root) if file_storage else settings.files_dir,
            check_dir=False,
        ),
        name="files",
    )

    @app.on_event("startup")
    async def startup_event():
        if app.state.document_store is None:
            app.state.document_store = build_document_store(settings)
        if app.state.file_storage is None:
            app.state.file_storage = LocalFileStorage(settings.files_dir, settings.public_base_url)
        logger.info("Submittal Packet API starting up...")
        logger.info(f"Using Worker URL: {settings.renderer_base_url}")
        logger.info(f"Allowed origins: {settings.get_origins_list()}")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Submittal Packet API shutting down...")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run("main:app", host="0.0.0.0", port=port)
