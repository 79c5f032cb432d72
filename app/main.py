import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.modules.content.fetcher import ContentFetcher
from app.modules.workshops.service import WorkshopRegistry, WorkshopService
from app.modules.content import routes as content_routes
from app.modules.workshops import routes as workshops_routes
from app.modules.configmaps import routes as configmaps_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.state.fetcher = ContentFetcher(
    timeout=settings.fetch_timeout_seconds,
    cache_ttl_seconds=settings.content_cache_ttl_seconds,
)
app.state.workshop_registry = WorkshopRegistry()
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"SAMEORIGIN"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Lab pages at the root, JSON API under /api/v1
app.include_router(content_routes.router)
app.include_router(workshops_routes.router, prefix="/api/v1")
app.include_router(configmaps_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")
    urls = settings.get_workshops_urls_list()
    if not urls:
        logger.warning("WORKSHOPS_URLS is empty, no workshops will be served")
        return
    service = WorkshopService(app.state.fetcher, settings)
    app.state.workshop_registry = await service.load_registry(urls)
    logger.info(
        f"Loaded {len(app.state.workshop_registry)} workshop(s), "
        f"{len(app.state.workshop_registry.failed_urls)} failed"
    )


@app.on_event("shutdown")
async def shutdown_event():
    await app.state.fetcher.aclose()
    logger.info("Application shutdown")


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Not ready when WORKSHOPS_URLS is set but no workshop could be loaded."""
    registry = app.state.workshop_registry
    if settings.get_workshops_urls_list() and len(registry) == 0:
        return JSONResponse(
            status_code=503,
            content={"status": "not ready", "failed_urls": registry.failed_urls},
        )
    return {"status": "ready", "workshops": len(registry)}
