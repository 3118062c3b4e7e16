"""
Login and admin pages
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

from appcatalog.utils.dependencies import AdminSession

PAGES_DIR = Path(__file__).resolve().parent.parent / "pages"

router = APIRouter()


@router.get("/login", response_class=FileResponse)
async def login_page():
    return FileResponse(PAGES_DIR / "login.html", media_type="text/html")


@router.get("/admin", response_class=FileResponse)
async def admin_page(session: AdminSession):
    return FileResponse(PAGES_DIR / "admin.html", media_type="text/html")
