from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .api import centers, offerings, availability, bookings
from .core.config import settings
from .core.database import create_tables
from . import models  # noqa: F401  registers tables on Base.metadata
import logging

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Careslots API",
    description="Weekly schedules, slot availability and bookings for doctors and lab tests at medical centers",
    version="1.0.0",
    debug=settings.debug
)


@app.on_event("startup")
async def startup_event():
    await create_tables()
    logger.info("Database tables are ready")


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(centers, prefix="/api")
app.include_router(offerings, prefix="/api")
app.include_router(availability, prefix="/api")
app.include_router(bookings, prefix="/api")


@app.get("/health")
async def health_check():
    """API health check"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
