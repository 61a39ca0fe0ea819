"""Health check endpoint."""

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request) -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": request.app.version,
    }
