"""supportdesk FastAPI application entry point.

Start with:
    uvicorn supportdesk.api.main:app --reload --host 0.0.0.0 --port 8000

The LLM provider is resolved from env (OPENROUTER_API_KEY, OPENAI_API_KEY,
GEMINI_API_KEY); without any key a no-op client is used and the agent falls
back to direct answers, canned replies and escalation. Knowledge comes from
KNOWLEDGE_CSV_PATH or Google Sheets; tickets go to Telegram when configured.
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from supportdesk import __version__
from supportdesk.config.settings import load_settings
from supportdesk.core.logger import configure
from supportdesk.services.agent_service import AgentService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ──────────────────────────────────────────────────
    configure()
    settings = load_settings()
    components = await AgentService.build(settings)

    app.state.settings = settings
    app.state.llm_client = components.llm
    app.state.knowledge_source = components.source
    app.state.session_manager = components.manager
    logger.info("API: agent ready (provider=%s)", components.llm.provider)

    yield

    # ── Shutdown ─────────────────────────────────────────────────
    logger.info("API: shutting down with %d open session(s)", len(components.manager))


app = FastAPI(
    title="supportdesk API",
    version=__version__,
    description="Bilingual knowledge-base support chat with ticket escalation.",
    lifespan=lifespan,
)

# Per-IP limit on POST /api/v1/chat (CHAT_RATE_LIMIT, default 30/minute)
from supportdesk.api.routers import chat, knowledge  # noqa: E402

app.state.limiter = chat.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

_allowed_origins = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Optional API key for the knowledge endpoints ─────────────────
# Set ADMIN_API_KEY to protect /api/v1/knowledge*; requests then need
# the header  X-Api-Key: <value>. Chat stays public.
_ADMIN_API_KEY = os.environ.get("ADMIN_API_KEY", "").strip() or None


@app.middleware("http")
async def api_key_middleware(request: Request, call_next):
    if _ADMIN_API_KEY and request.url.path.startswith("/api/v1/knowledge"):
        if request.headers.get("X-Api-Key") != _ADMIN_API_KEY:
            return JSONResponse(
                status_code=401,
                content={"detail": "Unauthorized: set X-Api-Key header"},
            )
    return await call_next(request)


# ── Routers ───────────────────────────────────────────────────────
app.include_router(chat.router, prefix="/api/v1")
app.include_router(knowledge.router, prefix="/api/v1")


@app.get("/health", tags=["health"])
async def health(request: Request):
    manager = getattr(request.app.state, "session_manager", None)
    knowledge_loaded = bool(manager and manager.orchestrator.knowledge.is_loaded())
    return {"status": "ok", "knowledge_loaded": knowledge_loaded}
