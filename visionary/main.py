from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from visionary.config import get_settings
from visionary.routers import gallery, generation
from visionary.services.imagen import imagen_service
from visionary.services.session import GenerationSession
from visionary.services.storage import storage
from visionary.utils.logger import get_logger, setup_logger

settings = get_settings()
setup_logger(settings.log_level)
logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    await storage.ensure_storage_exists()
    app.state.storage = storage
    app.state.session = GenerationSession(
        imagen_service,
        status_interval=settings.status_interval_seconds,
    )
    logger.info("%s started", settings.app_name)

    yield

    # Shutdown
    await app.state.session.close()


app = FastAPI(
    title=settings.app_name,
    description="""
    ## Visionary AI Image Studio

    Type a prompt, pick an aspect ratio, and get an image back from Nano Banana.

    ### How it works:

    1. **Compose**: set the prompt with `PUT /api/v1/session/prompt`, or let
       `POST /api/v1/session/surprise` pick one for you.
    2. **Generate**: `POST /api/v1/generate` starts a single generation. Only one
       runs at a time; poll `GET /api/v1/session` for the rotating status text
       and any error.
    3. **Browse**: finished images appear at the top of `GET /api/v1/gallery`.
       Delete or download them from there.

    ### Example prompts:
    - "A tiny dragon sleeping on a pile of gold coins"
    - "Cyberpunk street market in Tokyo, neon rain"
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc) if settings.debug else "Internal server error",
            "type": type(exc).__name__,
        },
    )


# Include routers
app.include_router(generation.router, prefix="/api/v1")
app.include_router(gallery.router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "session": "GET /api/v1/session",
            "update_prompt": "PUT /api/v1/session/prompt",
            "surprise_me": "POST /api/v1/session/surprise",
            "generate_image": "POST /api/v1/generate",
            "gallery": "GET /api/v1/gallery",
            "delete_image": "DELETE /api/v1/gallery/{image_id}",
            "download_image": "GET /api/v1/gallery/{image_id}/download",
        }
    }


def run() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("visionary.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
