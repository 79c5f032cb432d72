"""
Core dependencies shared by the HTML and API routes
"""

from fastapi import Depends, Request
from app.config import settings
from app.modules.content.fetcher import ContentFetcher
from app.modules.workshops.service import WorkshopRegistry, WorkshopService
from typing import Dict, Optional
import re
import logging

logger = logging.getLogger(__name__)

GUID_COOKIE = "workshop_guid"
GUID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def get_fetcher(request: Request) -> ContentFetcher:
    return request.app.state.fetcher


def get_workshop_registry(request: Request) -> WorkshopRegistry:
    """Registry built at startup; empty until the startup hook has run."""
    registry = getattr(request.app.state, "workshop_registry", None)
    if registry is None:
        registry = WorkshopRegistry()
    return registry


def get_workshop_service(fetcher: ContentFetcher = Depends(get_fetcher)) -> WorkshopService:
    return WorkshopService(fetcher, settings)


def valid_guid(value: Optional[str]) -> Optional[str]:
    """Return value if it is usable as a GUID, else None."""
    if value and GUID_PATTERN.match(value):
        return value
    if value:
        logger.warning(f"Ignoring invalid GUID value: {value!r}")
    return None


def get_attendee_overrides(request: Request, guid: Optional[str] = None) -> Dict[str, str]:
    """Per-attendee template values: ?guid= wins over the workshop_guid cookie."""
    value = valid_guid(guid) or valid_guid(request.cookies.get(GUID_COOKIE))
    return {"GUID": value} if value else {}
