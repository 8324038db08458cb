# Monitoring Package - Logging Setup and JSONL Event Log
from .logging_config import setup_logging
from .monitoring_service import MonitoringEvent, MonitoringService

__all__ = ["setup_logging", "MonitoringEvent", "MonitoringService"]
