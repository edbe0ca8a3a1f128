from fastapi import FastAPI
import logging

from adventure.api.deps import get_registry
from adventure.api.routes import router

app = FastAPI(title="adventure-session", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


@app.on_event("shutdown")
async def _shutdown() -> None:
    # Cancel outstanding hint timers before the loop goes away.
    registry_dep = app.dependency_overrides.get(get_registry, get_registry)
    registry_dep().close_all()


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "adventure-session", "version": "0.1.0"}
