"""Main entry point for the Gemini Chat Relay API."""
import json
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from config import PORT, CORS_ORIGINS, LLM_PROVIDER, LOG_FORMAT, LOG_LEVEL
from logger import setup_logging
from models.api import ChatResponse, ErrorResponse
from services import create_llm_client
from services.relay_formatter import (
    RelayFormatter,
    RelayValidationError,
    ProviderError,
)

if LOG_FORMAT == "json":
    setup_logging(LOG_LEVEL)

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Gemini Chat Relay",
    description="Stateless relay between chat clients and a hosted LLM",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialized on startup
relay_formatter: RelayFormatter = None


@app.on_event("startup")
async def startup_event():
    """Initialize the LLM client and relay formatter on startup."""
    global relay_formatter

    logger.info(f"Initializing Gemini Chat Relay with provider '{LLM_PROVIDER}'...")

    try:
        llm_client = create_llm_client(LLM_PROVIDER)
        relay_formatter = RelayFormatter(llm_client)
        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Gemini Chat Relay API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "gemini-chat-relay",
        "version": "1.0.0",
        "provider": LLM_PROVIDER
    }


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump()
    )


@app.post("/api/chat", response_model=ChatResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def chat_endpoint(request: Request):
    """
    Relay one chat turn to the model.

    The body is validated by the relay formatter rather than by FastAPI so that
    malformed requests get the relay's own 400 messages.

    Returns:
        200 {reply} on success, 400 {error} for a malformed request,
        500 {error} when the model call fails
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Request body is not valid JSON")
        payload = None

    try:
        reply = await run_in_threadpool(relay_formatter.process, payload)
        logger.info(f"Chat request processed successfully ({len(reply)} chars)")
        return ChatResponse(reply=reply)
    except RelayValidationError as e:
        logger.warning(f"Rejected chat request: {e.code}")
        return _error_response(e.status_code, str(e))
    except ProviderError as e:
        logger.error(f"Provider error: {e}")
        return _error_response(e.status_code, str(e))
    except Exception as e:
        logger.error(f"Unexpected error processing chat request: {e}", exc_info=True)
        return _error_response(500, "An unexpected error occurred")


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Gemini Chat Relay API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
