"""
FastAPI Application for Engagement Drift Support

Provides REST API endpoints for:
- Authentication (demo bearer tokens)
- Health logging
- Drift analysis (server variant)
- Nudges (list, mark read)
- Adaptive plan and dashboard insights
- Synthetic demo scenarios

IMPORTANT: Everything here tracks engagement, not health. Nothing is
medical advice.
"""

# Load environment variables FIRST (before other imports that may need them)
from dotenv import load_dotenv
load_dotenv()

import logging
from datetime import datetime
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from config.settings import get_settings
from monitoring.logging_config import setup_logging
from monitoring.monitoring_service import MonitoringService
from services.container import AppServices, StoreBundle, build_services
from services.errors import StoreUnavailableError

setup_logging(get_settings().log_level)
logger = logging.getLogger(__name__)


SUPPORTED_LANGUAGES = ("en", "es", "hi")

NUDGES_DISCLAIMER = "These are motivational messages only, not medical advice."


# =============================================================================
# APP SETUP
# =============================================================================

app = FastAPI(
    title="Engagement Drift Support API",
    description="Engagement drift scoring, supportive nudges and adaptive care plans",
    version="1.0.0",
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_services() -> AppServices:
    """Process-wide service container (SQLite stores + JSONL monitoring)."""
    settings = get_settings()
    return build_services(
        settings,
        StoreBundle.sqlite(settings.db_path),
        monitoring=MonitoringService(log_dir=settings.monitoring_log_dir),
    )


# =============================================================================
# REQUEST MODELS
# =============================================================================

class TokenRequest(BaseModel):
    user_id: str


class CreateLogRequest(BaseModel):
    log_type: str
    logged_at: Optional[datetime] = None
    value: Optional[float] = None


class MarkReadRequest(BaseModel):
    nudge_ids: Optional[List[str]] = None


class LanguageRequest(BaseModel):
    language: str = Field(..., min_length=2, max_length=10)


# =============================================================================
# AUTHENTICATION DEPENDENCY
# =============================================================================

async def get_current_user(
    authorization: Optional[str] = Header(None),
    services: AppServices = Depends(get_services),
):
    """Dependency to get current authenticated user."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")

    token = authorization.replace("Bearer ", "", 1)
    payload = services.tokens.verify(token)

    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return payload


def _to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive local time."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _store_error(services: AppServices, endpoint: str, error: StoreUnavailableError, detail: str):
    logger.error("%s failed: %s", endpoint, error)
    if services.monitoring:
        services.monitoring.log_api_error(endpoint, str(error), status_code=500)
    return HTTPException(status_code=500, detail=detail)


# =============================================================================
# ROUTES: HEALTH & AUTH
# =============================================================================

@app.get("/health")
async def health_check(services: AppServices = Depends(get_services)):
    """Health check endpoint for container orchestration."""
    return {
        "status": "healthy",
        "version": app.version,
        "environment": services.settings.environment,
        "services": {
            "drift": "ok",
            "nudges": "ok",
            "plans": "ok",
            "monitoring": "ok" if services.monitoring else "disabled",
        },
        "timestamp": datetime.now().isoformat(),
    }


@app.post("/auth/token")
async def issue_token(request: TokenRequest, services: AppServices = Depends(get_services)):
    """Issue a bearer token for a user id (demo identity)."""
    result = services.tokens.issue(request.user_id)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)

    return {
        "access_token": result.token,
        "token_type": "bearer",
        "user_id": result.user_id,
        "expires_at": result.expires_at.isoformat(),
    }


# =============================================================================
# ROUTES: LOGS
# =============================================================================

@app.post("/api/logs", status_code=201)
async def create_log(
    request: CreateLogRequest,
    user: dict = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    """Record a health log (glucose, meal/diet, activity, medication, weight, bp)."""
    try:
        event = services.logs.create(
            user["sub"],
            request.log_type,
            logged_at=_to_local_naive(request.logged_at),
            value=request.value,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Failed to create log")
        if services.monitoring:
            services.monitoring.log_api_error("/api/logs", str(e), status_code=500)
        raise HTTPException(status_code=500, detail="Failed to create log")

    return {"success": True, "log": event.to_dict()}


@app.get("/api/logs")
async def list_logs(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    log_type: Optional[str] = None,
    days: Optional[int] = Query(None, ge=1),
    user: dict = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    try:
        return services.logs.list(user["sub"], limit=limit, offset=offset, log_type=log_type, days=days)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreUnavailableError as e:
        raise _store_error(services, "/api/logs", e, "Failed to fetch activity logs")


# =============================================================================
# ROUTES: DRIFT & NUDGES
# =============================================================================

@app.post("/api/drift/analyze")
async def analyze_drift(
    user: dict = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    """Analyze the last 14 days of logs and select one nudge."""
    try:
        return services.drift.run(user["sub"])
    except StoreUnavailableError as e:
        raise _store_error(services, "/api/drift/analyze", e, "Failed to fetch activity logs")


@app.get("/api/nudges")
async def list_nudges(
    limit: int = Query(10, ge=1, le=100),
    unread: bool = False,
    user: dict = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    store = services.stores.nudges
    try:
        nudges = store.list_nudges(user["sub"], limit=limit, unread_only=unread)
        unread_count = store.unread_count(user["sub"])
    except Exception as e:
        logger.exception("Failed to fetch nudges")
        if services.monitoring:
            services.monitoring.log_api_error("/api/nudges", str(e), status_code=500)
        raise HTTPException(status_code=500, detail="Failed to fetch nudges")

    return {
        "nudges": [n.to_dict() for n in nudges],
        "unreadCount": unread_count,
        "disclaimer": NUDGES_DISCLAIMER,
    }


@app.patch("/api/nudges")
async def mark_nudges_read(
    request: MarkReadRequest,
    user: dict = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    if request.nudge_ids is None:
        raise HTTPException(status_code=400, detail="nudge_ids array required")

    try:
        updated = services.stores.nudges.mark_read(user["sub"], request.nudge_ids)
    except Exception as e:
        logger.exception("Failed to update nudges")
        if services.monitoring:
            services.monitoring.log_api_error("/api/nudges", str(e), status_code=500)
        raise HTTPException(status_code=500, detail="Failed to update nudges")

    return {"success": True, "updated": updated}


# =============================================================================
# ROUTES: PLAN & INSIGHTS
# =============================================================================

@app.get("/api/plan")
async def get_plan(
    user: dict = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    """Adaptive plan from the engagement window."""
    try:
        return services.plans.evaluate(user["sub"])
    except StoreUnavailableError as e:
        raise _store_error(services, "/api/plan", e, "Failed to fetch activity logs")


@app.get("/api/insights")
async def get_insights(
    user: dict = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    """Dashboard bundle. Falls back to synthetic data if logs are unavailable."""
    return services.insights.build(user["sub"])


@app.get("/api/demo/{scenario}")
async def get_demo(
    scenario: str,
    language: Optional[str] = None,
    services: AppServices = Depends(get_services),
):
    """Synthetic demo scenario: engaged, drifting or recovering."""
    try:
        return services.insights.demo(scenario, language=language)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


# =============================================================================
# ROUTES: PROFILE
# =============================================================================

@app.put("/api/profile/language")
async def set_language(
    request: LanguageRequest,
    user: dict = Depends(get_current_user),
    services: AppServices = Depends(get_services),
):
    language = request.language.strip().lower()
    if language not in SUPPORTED_LANGUAGES:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported language. Choose one of: {', '.join(SUPPORTED_LANGUAGES)}",
        )

    try:
        services.stores.profiles.set_language(user["sub"], language)
    except Exception as e:
        logger.exception("Failed to save language preference")
        if services.monitoring:
            services.monitoring.log_api_error("/api/profile/language", str(e), status_code=500)
        raise HTTPException(status_code=500, detail="Failed to save language preference")

    return {"success": True, "language": language}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
