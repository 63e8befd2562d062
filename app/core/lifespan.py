from contextlib import asynccontextmanager
import logging

from app.matching import build_match_orchestrator
from app.store import get_data_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    store = get_data_store()
    app.state.data_store = store
    app.state.match_orchestrator = build_match_orchestrator()
    logger.info("match_service_ready store=%s", type(store).__name__)
    yield
