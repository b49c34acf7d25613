"""
Main FastAPI application entry point.
"""

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from fastapi.responses import HTMLResponse

from fincalc.config import get_settings
from fincalc.api import router as api_router
from fincalc.catalog import CALCULATORS

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

UI_DIR = Path(__file__).resolve().parent / "ui"

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Personal finance calculators and email capture",
    version="0.1.0",
    debug=settings.debug,
)

# Mount static files
app.mount("/static", StaticFiles(directory=UI_DIR / "static"), name="static")

# Set up templates
templates = Jinja2Templates(directory=UI_DIR / "templates")

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Render the calculator index."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {"title": settings.app_name, "calculators": CALCULATORS},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": "0.1.0"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("fincalc.main:app", host=settings.host, port=settings.port)
