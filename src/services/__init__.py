# Services Package - Request-Level Orchestration
from .errors import DriftServiceError, StoreUnavailableError
from .drift_service import DriftAnalysisService
from .plan_service import PlanService
from .insights_service import InsightsService
from .log_service import LogService
from .container import AppServices, StoreBundle, build_services

__all__ = [
    "DriftServiceError",
    "StoreUnavailableError",
    "DriftAnalysisService",
    "PlanService",
    "InsightsService",
    "LogService",
    "AppServices",
    "StoreBundle",
    "build_services",
]
