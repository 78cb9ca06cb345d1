"""FastAPI application - RequestPing."""

from fastapi import FastAPI

from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.offices import router as offices_router
from backend.app.api.routes.requests import router as requests_router

app = FastAPI(title="RequestPing API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(offices_router)
app.include_router(requests_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "RequestPing API", "version": "0.1.0"}
