from fastapi import APIRouter
from fastapi.responses import HTMLResponse
from pathlib import Path

router = APIRouter(tags=["Demo"])

INDEX_PAGE = Path(__file__).resolve().parent.parent / "pages" / "index.html"

@router.get("/", response_class=HTMLResponse)
def read_root():
    """Reference client page driving /upload and /files"""
    return HTMLResponse(INDEX_PAGE.read_text(encoding="utf-8"))

@router.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "API is running"
    }
