"""
Quiz Engine Server

FastAPI server with:
- Quiz generation from extracted document content
- Answer evaluation (exact, completion-based, lexical fallback)
- Quiz persistence via AgentFS
- CORS
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import app_state
from quiz.router import router as quiz_router

settings = app_state.get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage app lifecycle."""
    logger.info(f"Starting Quiz Engine (provider: {settings.completion_provider})")
    yield
    await app_state.cleanup()
    logger.info("Quiz Engine stopped")


app = FastAPI(
    title="Quiz Engine",
    description="Quiz generation and evaluation from document content",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quiz_router)


@app.get("/")
async def root():
    """Health check."""
    return {"status": "ok", "message": "Quiz Engine"}


@app.get("/health")
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "completion_provider": settings.completion_provider,
        "completion_configured": settings.completion_provider != "huggingface" or bool(settings.api_key),
        "agentfs_active": app_state.agentfs is not None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8001)
