from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from database.mongodb import db
from config import get_settings
from routes import amps, tolerances, catalogs, dataset
from services.color_registry import AMP_PALETTE, ColorRegistry
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for the app"""
    await db.connect(settings.mongo_url, settings.db_name)
    await db.ensure_indexes()
    logger.info("AMP Records Backend started")
    yield
    await db.disconnect()
    logger.info("AMP Records Backend stopped")


app = FastAPI(
    title="AMP Records API",
    description="Aircraft Maintenance Programme records: fleets, aircraft, documents and tolerances",
    version="1.0.0",
    lifespan=lifespan
)

app.state.amp_colors = ColorRegistry(AMP_PALETTE)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(amps.router)
app.include_router(tolerances.router)
app.include_router(catalogs.router)
app.include_router(dataset.router)


@app.get("/")
async def root():
    return {
        "message": "AMP Records API",
        "organization": settings.organization_name,
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
