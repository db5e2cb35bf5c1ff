"""
Convivio Web - FastAPI application.

Exposes the backend-mediated proposal: the client sends only ids, the server
loads dinner and cellar itself and calls the model.
"""

import logging

from fastapi import Depends, FastAPI, HTTPException

from convivio import __version__
from convivio.config import Settings, get_settings, settings
from convivio.errors import (
    CompletionTimeoutError,
    ConfigurationError,
    ConvivioError,
    DecodeError,
    DinnerNotFoundError,
    NetworkError,
    RateLimitError,
)
from convivio.llm.client import CompletionClient, get_completion_client
from convivio.models.proposal import ProposeRequest, ProposeResponse
from convivio.proposal import propose_dinner_menu
from convivio.store import DinnerStore, get_store

logger = logging.getLogger(__name__)

app = FastAPI(title="Convivio", version=__version__)


@app.on_event("startup")
async def startup_event():
    """Log configuration on startup."""
    logger.info("Convivio starting up...")
    logger.info(f"  Provider: {settings.llm_provider}")
    logger.info(f"  Credential configured: {settings.has_completion_credential}")
    logger.info(f"  Prompt file logging: {settings.convivio_log_prompts}")


def http_error(error: ConvivioError) -> HTTPException:
    """Map a pipeline error to the HTTP status the client sees."""
    if isinstance(error, ConfigurationError):
        return HTTPException(status_code=503, detail=str(error))
    if isinstance(error, DinnerNotFoundError):
        return HTTPException(status_code=404, detail="Cena non trovata")
    if isinstance(error, RateLimitError):
        headers = None
        if error.retry_after is not None:
            headers = {"Retry-After": str(int(error.retry_after))}
        return HTTPException(status_code=429, detail=str(error), headers=headers)
    if isinstance(error, CompletionTimeoutError):
        return HTTPException(status_code=504, detail=str(error))
    if isinstance(error, (DecodeError, NetworkError)):
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": __version__}


@app.post("/propose", response_model=ProposeResponse)
async def propose(
    request: ProposeRequest,
    store: DinnerStore = Depends(get_store),
    client: CompletionClient = Depends(get_completion_client),
    settings: Settings = Depends(get_settings),
):
    """Generate a menu proposal with wine pairings for a dinner."""
    try:
        return await propose_dinner_menu(
            request, store=store, client=client, settings=settings
        )
    except ConvivioError as e:
        logger.error(f"Proposal failed for dinner {request.dinner_id}: {e}")
        raise http_error(e) from e


@app.get("/debug/completions")
async def debug_completions(
    client: CompletionClient = Depends(get_completion_client),
    settings: Settings = Depends(get_settings),
):
    """Recent completion calls, most recent first. Development only."""
    if not settings.is_development:
        raise HTTPException(status_code=404, detail="Not found")
    return [entry.model_dump(mode="json") for entry in client.debug_log.entries()]
