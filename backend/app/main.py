"""FastAPI application."""

from fastapi import FastAPI

from backend.app.api.routes.generate import router as generate_router
from backend.app.api.routes.geo import router as geo_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.itinerary import router as itinerary_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.share import router as share_router

app = FastAPI(title="Trip Itinerary Planner API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(generate_router)
app.include_router(itinerary_router)
app.include_router(geo_router)
app.include_router(share_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Trip Itinerary Planner API", "version": "0.1.0"}
