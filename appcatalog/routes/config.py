"""
Public branding configuration
"""

from fastapi import APIRouter

from appcatalog.utils.dependencies import SettingsDep

router = APIRouter()


@router.get("/api/config")
async def get_config(settings: SettingsDep):
    """Company name and icon for the frontend"""
    return {
        "companyName": settings.company_name,
        "companyIcon": settings.company_icon_url,
    }
