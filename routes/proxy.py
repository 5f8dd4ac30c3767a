from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from models.user import User
from routes.deps import get_current_user
from services.recipe_import_service import recipe_import_service

router = APIRouter()


@router.get("/recipe-proxy")
def recipe_proxy(url: str = Query(..., min_length=1), user: User = Depends(get_current_user)) -> Response:
    """Hämta en extern receptsida åt klienten (undviker CORS i webbläsaren)."""
    content, content_type = recipe_import_service.fetch_page(url)
    return Response(content=content, media_type=content_type)
