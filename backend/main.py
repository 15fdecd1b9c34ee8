"""
Mitra FastAPI Backend

This is the main entry point for the API server that exposes the
coordinator and its agents to the mobile client.

Architecture:
- FastAPI handles HTTP routing and request/response validation
- Pydantic schemas ensure type safety
- The Coordinator and its agents handle all business logic
- The document store provides persistence via SQLite or PostgreSQL

Run with:
    uvicorn backend.main:app --reload --port 8000

Or:
    python -m backend.main
"""

import logging
import sys
from pathlib import Path
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from backend.routers import chat_router, schedule_router, records_router
from backend.dependencies import get_config, get_coordinator, get_store
from backend.schemas import ActivityResponse
from mitra.agents import Coordinator

logger = logging.getLogger("backend")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Runs startup and shutdown tasks:
    - Startup: Verify the document store
    - Shutdown: Clean up agents
    """
    try:
        config = get_config()
        store = get_store()
        logger.info("Document store ready: %s", type(store).__name__)
        logger.info("Config loaded from: %s", config.config_dir)
    except FileNotFoundError as e:
        logger.error("%s", e)
        # Allow app to start; endpoints report the error

    yield

    if get_coordinator.cache_info().currsize:
        get_coordinator().cleanup()
    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Mitra API",
    description="""
    Multi-agent personal assistant API.

    ## Features

    - **Chat**: Log workouts, tasks, expenses, journal entries, medications and habits
    - **Schedule**: Generate a balanced day or optimize your own schedule
    - **Records**: Browse what each agent has stored

    ## Chat Examples

    - "Did bench press 3x8 at 80kg"
    - "Spent $12 on lunch"
    - "Remind me to take metformin in the evening"
    - "Plan my day"
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for the mobile client and local tools
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(chat_router)
app.include_router(schedule_router)
app.include_router(records_router)


@app.get("/")
async def root(coordinator: Coordinator = Depends(get_coordinator)):
    """API root - returns the agents and available endpoints."""
    return {
        "name": "Mitra API",
        "version": "1.0.0",
        "docs": "/docs",
        "agents": coordinator.get_agent_summaries(),
        "endpoints": {
            "chat": "POST /chat",
            "schedule": "GET /schedule",
            "optimize": "POST /optimize-schedule",
            "tasks": "GET /tasks",
            "workouts": "GET /workouts",
            "finance": "GET /finance",
            "journal": "GET /journal",
            "activity": "GET /activity",
        }
    }


@app.get("/health")
async def health_check(coordinator: Coordinator = Depends(get_coordinator)):
    """Health check endpoint for monitoring."""
    try:
        coordinator.store.ping()
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}


@app.get("/activity", response_model=ActivityResponse)
async def activity(
    limit: Optional[int] = Query(50, ge=1, le=500),
    coordinator: Coordinator = Depends(get_coordinator),
):
    """Most recent events routed through the coordinator, oldest first."""
    entries = coordinator.get_activity_log(limit)
    return {"activity": entries, "count": len(entries)}


# Allow running directly with: python -m backend.main
if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
