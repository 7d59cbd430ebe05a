import logging
from fastapi import FastAPI
from prhistory.config import get_settings
from prhistory.api.routes import prs

settings = get_settings()

# Configure application logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Set log level for prhistory modules
logger = logging.getLogger("prhistory")
logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

app = FastAPI(
    title=settings.app_name,
    description="Merged pull request and commit history for changelog generation",
    version="0.1.0",
)

# Include routers
app.include_router(prs.router, prefix="/api/prs", tags=["Pull Requests"])


@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": "0.1.0",
        "endpoints": {
            "prs": "/api/prs",
            "health": "/health",
            "docs": "/docs",
            "redoc": "/redoc",
        },
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": settings.app_name}
