from fastapi import FastAPI
import logging

from app.api.routes import router
from app.config import get_settings

__version__ = "0.1.0"

app = FastAPI(title="bingo-rooms", version=__version__)
app.include_router(router)
# Configure logging
logging.basicConfig(level=get_settings().log_level)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "bingo-rooms", "version": __version__}
