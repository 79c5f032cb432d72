from fastapi import APIRouter, Depends
from app.modules.workshops.schemas import WorkshopDefinition, WorkshopSummary, LabPage
from app.modules.workshops.service import WorkshopRegistry, WorkshopService
from app.core.dependencies import get_workshop_registry, get_workshop_service, get_attendee_overrides
from typing import List, Dict
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workshops", tags=["workshops"])


@router.get("", response_model=List[WorkshopSummary])
async def list_workshops(registry: WorkshopRegistry = Depends(get_workshop_registry)):
    """List loaded workshops in WORKSHOPS_URLS order"""
    return registry.summaries()


@router.get("/{workshop_id}", response_model=WorkshopDefinition)
async def get_workshop(workshop_id: str, registry: WorkshopRegistry = Depends(get_workshop_registry)):
    """Get a workshop definition with its ordered labs"""
    return registry.get(workshop_id)


@router.get("/{workshop_id}/labs/{lab_id}", response_model=LabPage)
async def get_lab(
    workshop_id: str,
    lab_id: str,
    registry: WorkshopRegistry = Depends(get_workshop_registry),
    service: WorkshopService = Depends(get_workshop_service),
    overrides: Dict[str, str] = Depends(get_attendee_overrides),
):
    """Render a lab to HTML. Accepts ?guid= like the HTML pages, but never sets a cookie."""
    workshop = registry.get(workshop_id)
    return await service.render_lab(workshop, lab_id, overrides)
