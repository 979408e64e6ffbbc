"""Health check endpoint — no database or asset store calls, always available."""

from fastapi import APIRouter

from app.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Returns the application health status and the configured asset backend."""
    settings = get_settings()
    backend = settings.asset_store_backend.strip().lower()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "asset_store": backend,
        "asset_store_configured": backend == "local" or settings.cloudinary_configured,
    }
