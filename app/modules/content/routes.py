from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, RedirectResponse
from app.config import settings
from app.modules.content import renderer
from app.modules.workshops.service import WorkshopRegistry, WorkshopService
from app.core.dependencies import (
    GUID_COOKIE, get_workshop_registry, get_workshop_service, get_attendee_overrides, valid_guid,
)
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["content"])


@router.get("/", response_class=HTMLResponse)
async def index(registry: WorkshopRegistry = Depends(get_workshop_registry)):
    """Workshop index, or a redirect to DEFAULT_WORKSHOP when it is loaded"""
    if settings.default_workshop and settings.default_workshop in registry:
        return RedirectResponse(url=renderer.workshop_url(settings.default_workshop), status_code=307)
    return HTMLResponse(renderer.render_index(registry.summaries(), settings.app_name))


@router.get("/workshop/{workshop_id}")
async def workshop_start(workshop_id: str, registry: WorkshopRegistry = Depends(get_workshop_registry)):
    workshop = registry.get(workshop_id)
    return RedirectResponse(url=renderer.workshop_url(workshop.id, workshop.modules[0].id), status_code=307)


@router.get("/workshop/{workshop_id}/lab/{lab_id}", response_class=HTMLResponse)
async def lab_page(
    workshop_id: str,
    lab_id: str,
    guid: Optional[str] = None,
    registry: WorkshopRegistry = Depends(get_workshop_registry),
    service: WorkshopService = Depends(get_workshop_service),
    overrides: Dict[str, str] = Depends(get_attendee_overrides),
):
    """Render one lab page. ?guid= is remembered in a cookie for later pages."""
    workshop = registry.get(workshop_id)
    page = await service.render_lab(workshop, lab_id, overrides)
    response = HTMLResponse(renderer.render_page(workshop, page))
    accepted = valid_guid(guid)
    if accepted:
        response.set_cookie(GUID_COOKIE, accepted, httponly=True, samesite="lax")
    return response
