import logging

from fastapi import FastAPI

from trivia import config
from trivia.api.routes import router
from trivia.content.registry import ContentRepository

app = FastAPI(title="trivia-quiz", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    # Tests may install their own repository before the app starts.
    if getattr(app.state, "content", None) is None:
        data_dir = config.get_data_dir()
        app.state.content = ContentRepository.from_directory(data_dir)
        logger.info("Content repository ready", extra={"data_dir": str(data_dir)})


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "trivia-quiz", "version": "0.1.0", "function_version": config.function_version()}
