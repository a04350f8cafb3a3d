"""
Cooking Path API - Application Entry Point

FastAPI application serving the multi-recipe cooking scheduler.

Architecture Overview:
=====================
- Models (cooking_path/models/):
  - entities.py: Dataclasses for recipes, steps, schedules and progress
  - schemas.py: Pydantic schemas for API requests/responses and Claude proposals

- Controllers (cooking_path/controllers/):
  - cooking_path.py: Schedule generation and live progress sessions

- Services (cooking_path/services/): Business logic layer
  - quantities.py / servings.py: Quantity parsing and serving adjustment
  - scheduler.py: Built-in stagger planner, proposal validation, planner selection
  - claude.py: Claude-backed schedule proposals
  - progress.py / session.py: Live step status and the ticking clock
  - timeline.py: Display formatting

Request Flow:
============
1. Request arrives at a Controller endpoint
2. Controller validates input using Pydantic Schemas
3. Controller calls Services for adjustment, scheduling and progress
4. Response is serialized using Pydantic Schemas

Run with: uvicorn cooking_path.main:app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cooking_path import __version__
from cooking_path.config import get_settings
from cooking_path.controllers import cooking_path_router
from cooking_path.controllers.cooking_path import active_sessions, close_all_sessions

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Cooking Path API starting (Claude planner {'on' if settings.claude_available else 'off'})")
    yield
    # Running tickers would outlive the app otherwise
    close_all_sessions()


# Create FastAPI application
app = FastAPI(
    title="Cooking Path API",
    description="""
    Multi-recipe cooking scheduler.

    ## Features
    - Serving size adjustment of generated recipes
    - Coordinated prep/cook timeline across several recipes
    - Claude-assisted scheduling with a built-in fallback
    - Live step status driven by a server-side cooking clock
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware configuration
# Allows the web frontend to communicate with the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(cooking_path_router)   # /cooking-path endpoints


# ============================================
# Health Check Endpoints
# ============================================

@app.get("/", tags=["health"])
def root():
    """
    Basic health check endpoint.

    Returns a simple status indicating the API is running.
    """
    return {
        "status": "healthy",
        "service": "Cooking Path API",
        "version": __version__
    }


@app.get("/health", tags=["health"])
def health_check():
    """
    Detailed health check endpoint.

    Reports which schedule planner is in use and how many sessions are open.
    """
    return {
        "status": "healthy",
        "planner": "claude" if settings.claude_available else "fallback",
        "active_sessions": len(active_sessions)
    }
