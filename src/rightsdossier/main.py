"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

# Phase 1: Singleton logging — MUST be before any rightsdossier imports
# (they transitively import litellm which reads LITELLM_LOG at import time)
from rightsdossier.logging_config import setup_logging

setup_logging()

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from rightsdossier import __version__  # noqa: E402
from rightsdossier.api.routes import analysis, health, rights  # noqa: E402
from rightsdossier.config import Settings  # noqa: E402
from rightsdossier.dialogue.orchestrator import (  # noqa: E402
    DialogueOrchestrator,
)
from rightsdossier.logger import DossierLogger  # noqa: E402
from rightsdossier.logging_config import (  # noqa: E402
    cleanup_third_party_handlers,
)
from rightsdossier.search.semantic import (  # noqa: E402
    SemanticConceptMatcher,
    get_session_cache,
)

# Phase 2: Now that all imports (including litellm) are done,
# clear litellm's duplicate handlers.
cleanup_third_party_handlers()

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # 1. Use module-level settings (single source of truth)
    settings = _settings

    # 2. Initialize logger
    logger = DossierLogger(
        log_dir=settings.log_dir, level=settings.log_level
    )

    # 3. Initialize services
    orchestrator = DialogueOrchestrator(settings, logger)
    matcher = SemanticConceptMatcher(
        settings=settings, cache=get_session_cache()
    )

    # 4. Store in app.state
    app.state.settings = settings
    app.state.logger = logger
    app.state.orchestrator = orchestrator
    app.state.matcher = matcher

    # 5. Warn if no provider key is configured
    if not (settings.gemini_api_key or settings.openai_api_key):
        _logger.warning(
            "event=no_provider_key action=relying_on_litellm_env"
        )

    yield

    # Cleanup
    matcher.cancel()


app = FastAPI(
    title="Rights Dossier",
    description=(
        "Grounded citations for human rights law,"
        " current status and scholarship"
    ),
    version=__version__,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

_settings = Settings()
_cors_origins = [
    o.strip()
    for o in _settings.cors_origins.split(",")
    if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
    allow_credentials=False,
)

# Routes
app.include_router(health.router)
app.include_router(rights.router)
app.include_router(analysis.router)
