from contextlib import asynccontextmanager
from functools import partial
from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from typing import Dict, List, Optional
import logging
import re
import uuid

from api.config import settings
from api.database import SessionLocal, init_db, engine
from scrapers.base import ExtractionResult
from scrapers.config import get_site_config
from scrapers.crawlers.browser import BrowserSession
from scrapers.exceptions import ExtractionError, InvalidInputError, SnapshotError
from scrapers.manager import PipelineRunner, SiteOutcome
from scrapers.pipeline import validate_term
from scrapers.storage import DatabaseSnapshotStore, JsonFileSnapshotStore, SnapshotStore
from scrapers.utils.normalizers import parse_price
from pydantic import BaseModel

VERSION = "1.0.0"

# Setup logging directory
settings.log_dir.mkdir(exist_ok=True)


# Custom formatter to strip ANSI color codes from file logs
class ColorStripFormatter(logging.Formatter):
    """Formatter that strips ANSI color codes from log messages."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

    def format(self, record):
        message = super().format(record)
        return self.ansi_escape.sub('', message)

# Setup logging with color support for console, stripped for file
file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
file_handler.setFormatter(ColorStripFormatter(settings.log_format))

console_handler = logging.StreamHandler()
console_handler.setFormatter(logging.Formatter(settings.log_format))

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    handlers=[file_handler, console_handler],
    force=True  # Override any existing configuration
)

# Per-site loggers live under 'scraper' (scraper.AMAZON, scraper.ALIEXPRESS)
scraper_logger = logging.getLogger('scraper')
scraper_logger.setLevel(getattr(logging, settings.log_level.upper()))

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("Buscador Backend Starting Up")
    logger.info("=" * 60)
    logger.info(f"Log file: {settings.log_file}")
    logger.info(f"Snapshot backend: {settings.snapshot_backend}")
    if settings.snapshot_backend == "database":
        logger.info(f"Database: {settings.database_url}")
        init_db()
        logger.info("Database initialized successfully")
    else:
        logger.info(f"Snapshot directory: {settings.data_dir}")
    logger.info("Backend ready to accept requests")

    yield  # Application runs here

    # Shutdown
    logger.info("Buscador Backend Shutting Down")
    engine.dispose()
    logger.info("Shutdown complete")


app = FastAPI(
    title="Buscador API",
    version=VERSION,
    lifespan=lifespan
)

# CORS middleware - allow all origins for development
# Note: allow_credentials must be False when allow_origins is ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    """Return empty response for favicon requests"""
    return Response(status_code=204)


# Pydantic models for API requests and responses
class SearchRequest(BaseModel):
    producto: Optional[str] = None


class ListingResponse(BaseModel):
    id: str
    title: str
    raw_price: str
    image_url: str
    price: Optional[float] = None  # Numeric part of raw_price, currency untouched


class SiteResultResponse(BaseModel):
    listings: Optional[List[ListingResponse]] = None
    error: Optional[str] = None


# Dependencies

def get_snapshot_store() -> SnapshotStore:
    """Snapshot store selected by SNAPSHOT_BACKEND."""
    if settings.snapshot_backend == "database":
        return DatabaseSnapshotStore(SessionLocal)
    return JsonFileSnapshotStore(settings.data_dir)


def get_runner(snapshot_store: SnapshotStore = Depends(get_snapshot_store)) -> PipelineRunner:
    """Runner with real browser sessions."""
    return PipelineRunner(
        session_factory=partial(
            BrowserSession,
            headless=settings.browser_headless,
            timeout=settings.navigation_timeout,
        ),
        snapshot_store=snapshot_store,
        settle_seconds=settings.settle_seconds,
    )


def serialize_outcome(site_key: str, outcome: SiteOutcome) -> Dict:
    """
    Convert a site outcome to its response shape.

    Listings get a random id here; the extraction layer never assigns one.
    """
    if isinstance(outcome, ExtractionError):
        name = get_site_config(site_key).name
        return {"error": f"Error al realizar el scraping en {name}: {outcome.message}"}

    listings = []
    for listing in outcome.listings:
        listings.append({
            "id": listing.id or uuid.uuid4().hex,
            "title": listing.title,
            "raw_price": listing.raw_price,
            "image_url": listing.image_url,
            "price": parse_price(listing.raw_price),
        })
    return {"listings": listings}


def require_term(request: SearchRequest) -> str:
    try:
        return validate_term(request.producto)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))


# API Endpoints

@app.get("/")
async def root():
    return {"message": "Buscador API", "version": VERSION}


@app.get("/api/sites")
async def list_sites(runner: PipelineRunner = Depends(get_runner)):
    """List configured sites and their implementation status"""
    return {
        "sites": runner.list_sites(),
        "implemented": runner.get_implemented_sites()
    }


@app.post("/api/search")
async def search_all(request: SearchRequest, runner: PipelineRunner = Depends(get_runner)):
    """Search every enabled site; each site reports listings or an error"""
    term = require_term(request)
    results = await runner.run_all(term)
    return {
        "term": term,
        "results": {key: serialize_outcome(key, outcome) for key, outcome in results.items()},
        "summary": runner.get_results_summary(results),
    }


@app.post("/api/search/{site_key}", response_model=SiteResultResponse, response_model_exclude_none=True)
async def search_site(site_key: str, request: SearchRequest, runner: PipelineRunner = Depends(get_runner)):
    """Search a single site"""
    term = require_term(request)
    try:
        runner.get_extractor(site_key)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    outcome = await runner.run_site(site_key, term)
    body = serialize_outcome(site_key, outcome)
    if isinstance(outcome, ExtractionResult):
        return body
    raise HTTPException(status_code=500, detail=body["error"])


@app.get("/api/snapshots/{site_key}")
async def get_snapshot(site_key: str, snapshot_store: SnapshotStore = Depends(get_snapshot_store)):
    """Last successful listings saved for a site"""
    try:
        get_site_config(site_key)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        listings = snapshot_store.load(site_key)
    except SnapshotError as e:
        logger.error(f"Snapshot for {site_key} is unreadable: {e}")
        raise HTTPException(status_code=500, detail=f"Snapshot for {site_key} is unreadable")
    if listings is None:
        raise HTTPException(status_code=404, detail=f"No snapshot saved for {site_key}")
    return {"site": site_key, "total": len(listings), "listings": listings}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        access_log=True,
        log_config=None,  # Keep our handlers
        timeout_keep_alive=5,
        timeout_graceful_shutdown=5.0,
    )
