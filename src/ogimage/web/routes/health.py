"""Health check route."""

from fastapi import APIRouter

from ogimage import __version__

router = APIRouter()


@router.get("/health")
async def health():
    """Report that the server is up."""
    return {"status": "ok", "version": __version__}
