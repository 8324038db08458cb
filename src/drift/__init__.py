# Drift Package - Engagement Drift Scoring
from .engine import DriftScoringEngine, export_analysis, generate_explanation
from .log_analyzer import LogDriftAnalyzer
from .normalize import to_drift_analysis
from .window import build_window
from .synthetic import PatientBehaviorData, generate_synthetic_patient_data, sample_scenario

__all__ = [
    "DriftScoringEngine",
    "export_analysis",
    "generate_explanation",
    "LogDriftAnalyzer",
    "to_drift_analysis",
    "build_window",
    "PatientBehaviorData",
    "generate_synthetic_patient_data",
    "sample_scenario",
]
