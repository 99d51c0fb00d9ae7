import logging

from fastapi import FastAPI

from snakecalc.api.routes import router
from snakecalc.config import settings_from_env

app = FastAPI(title="snake-calc", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=settings_from_env().log_level)
logger = logging.getLogger(__name__)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "snake-calc", "version": "0.1.0"}
