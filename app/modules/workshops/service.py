from app.modules.workshops.schemas import WorkshopDefinition, WorkshopSummary, LabModule, LabPage
from app.modules.content.fetcher import ContentFetcher
from app.modules.content import renderer
from app.config import Settings
from typing import Any, Dict, List, Optional, Tuple
from fastapi import HTTPException
from pathlib import PurePosixPath
from urllib.parse import urlparse
import httpx
import yaml
import logging

logger = logging.getLogger(__name__)


def _stringify_vars(raw: Any, where: str) -> Dict[str, str]:
    """Template vars are flat strings; YAML scalars are converted, nested values rejected."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"{where}: vars must be a mapping")
    out = {}
    for key, value in raw.items():
        if isinstance(value, (dict, list)):
            raise ValueError(f"{where}: var {key} must be a scalar")
        if isinstance(value, bool):
            out[str(key)] = "true" if value else "false"
        elif value is None:
            out[str(key)] = ""
        else:
            out[str(key)] = str(value)
    return out


def _default_id(source_url: Optional[str]) -> Optional[str]:
    if not source_url:
        return None
    stem = PurePosixPath(urlparse(source_url).path).stem
    return stem or None


def parse_workshop_definition(text: str, source_url: Optional[str] = None) -> WorkshopDefinition:
    """
    Parse a workshop definition YAML document.
    Raises ValueError (including pydantic.ValidationError) when the document is malformed.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {source_url}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Workshop definition {source_url} must be a mapping")

    workshop_id = str(data.get("id") or _default_id(source_url) or "")
    if not workshop_id:
        raise ValueError("Workshop definition has no id")

    raw_modules = data.get("modules")
    if isinstance(raw_modules, dict):
        # Workshopper-style {activate: [...]}
        raw_modules = raw_modules.get("activate")
    if not isinstance(raw_modules, list):
        raise ValueError(f"Workshop {workshop_id}: modules must be a list")

    modules = []
    for entry in raw_modules:
        if isinstance(entry, str):
            modules.append({"id": entry})
        elif isinstance(entry, dict) and entry.get("id"):
            module = dict(entry)
            module["id"] = str(module["id"])
            module["vars"] = _stringify_vars(entry.get("vars"), f"Workshop {workshop_id} module {module['id']}")
            modules.append(module)
        else:
            raise ValueError(f"Workshop {workshop_id}: invalid module entry {entry!r}")

    content = data.get("content")
    if isinstance(content, str):
        content = {"url": content}

    return WorkshopDefinition(
        id=workshop_id,
        name=str(data.get("name") or workshop_id),
        description=data.get("description"),
        content=content or {},
        vars=_stringify_vars(data.get("vars"), f"Workshop {workshop_id}"),
        modules=modules,
        source_url=source_url,
    )


class WorkshopRegistry:
    """Workshops loaded at startup, in WORKSHOPS_URLS order. Not modified after loading."""

    def __init__(self, workshops: Optional[List[WorkshopDefinition]] = None, failed_urls: Optional[List[str]] = None):
        self._workshops: Dict[str, WorkshopDefinition] = {}
        for workshop in workshops or []:
            if workshop.id in self._workshops:
                logger.warning(f"Skipping duplicate workshop id {workshop.id} from {workshop.source_url}")
                continue
            self._workshops[workshop.id] = workshop
        self.failed_urls = list(failed_urls or [])

    def __len__(self) -> int:
        return len(self._workshops)

    def __contains__(self, workshop_id: str) -> bool:
        return workshop_id in self._workshops

    def list(self) -> List[WorkshopDefinition]:
        return list(self._workshops.values())

    def summaries(self) -> List[WorkshopSummary]:
        return [
            WorkshopSummary(id=w.id, name=w.name, description=w.description, lab_count=len(w.modules))
            for w in self._workshops.values()
        ]

    def get(self, workshop_id: str) -> WorkshopDefinition:
        workshop = self._workshops.get(workshop_id)
        if workshop is None:
            raise HTTPException(status_code=404, detail="Workshop not found")
        return workshop


class WorkshopService:
    def __init__(self, fetcher: ContentFetcher, settings: Settings):
        self.fetcher = fetcher
        self.settings = settings

    async def load_registry(self, urls: List[str]) -> WorkshopRegistry:
        """Fetch and parse each definition URL. Failures are logged and skipped."""
        workshops = []
        failed = []
        for url in urls:
            try:
                text = await self.fetcher.fetch_text(url)
                workshop = parse_workshop_definition(text, source_url=url)
            except (httpx.HTTPError, OSError) as e:
                logger.error(f"Failed to fetch workshop definition {url}: {e}")
                failed.append(url)
                continue
            except ValueError as e:
                logger.error(f"Invalid workshop definition {url}: {e}")
                failed.append(url)
                continue
            logger.info(f"Loaded workshop {workshop.id} ({len(workshop.modules)} labs) from {url}")
            workshops.append(workshop)
        return WorkshopRegistry(workshops, failed_urls=failed)

    def content_base(self, workshop: WorkshopDefinition) -> Optional[str]:
        if workshop.content.url:
            return workshop.content.url.rstrip("/")
        if self.settings.content_url_prefix:
            return self.settings.content_url_prefix.rstrip("/")
        if workshop.source_url:
            return ContentFetcher.parent(workshop.source_url)
        return None

    def get_lab(self, workshop: WorkshopDefinition, lab_id: str) -> Tuple[int, LabModule]:
        for index, module in enumerate(workshop.modules):
            if module.id == lab_id:
                return index, module
        raise HTTPException(status_code=404, detail="Lab not found")

    async def fetch_lab_source(self, workshop: WorkshopDefinition, module: LabModule) -> str:
        base = self.content_base(workshop)
        try:
            location = ContentFetcher.resolve(base, module.file)
        except ValueError as e:
            logger.error(f"Refusing lab {workshop.id}/{module.id}: {e}")
            raise HTTPException(status_code=502, detail=f"Failed to fetch lab content for {module.id}")
        try:
            return await self.fetcher.fetch_text(location)
        except (httpx.HTTPError, OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to fetch lab {workshop.id}/{module.id} from {location}: {e}")
            raise HTTPException(status_code=502, detail=f"Failed to fetch lab content for {module.id}")

    async def render_lab(
        self,
        workshop: WorkshopDefinition,
        lab_id: str,
        overrides: Optional[Dict[str, str]] = None,
    ) -> LabPage:
        """Fetch a lab document, substitute its placeholders and convert it to HTML."""
        index, module = self.get_lab(workshop, lab_id)
        source = await self.fetch_lab_source(workshop, module)
        base = self.content_base(workshop)
        context = renderer.build_context(self.settings, workshop, module, base, overrides)
        text = renderer.substitute(source, context, image_base=base)
        title, html = renderer.render_document(text, module.file)
        previous_module = workshop.modules[index - 1] if index > 0 else None
        next_module = workshop.modules[index + 1] if index + 1 < len(workshop.modules) else None
        return LabPage(
            workshop_id=workshop.id,
            lab_id=module.id,
            title=title or module.name,
            html=html,
            index=index,
            previous_lab_id=previous_module.id if previous_module else None,
            next_lab_id=next_module.id if next_module else None,
        )
