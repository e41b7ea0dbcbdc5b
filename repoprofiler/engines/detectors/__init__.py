"""Heuristic detectors: independent, concurrently run, never raising."""

from repoprofiler.engines.detectors.cicd import detect_cicd
from repoprofiler.engines.detectors.context import DetectionContext
from repoprofiler.engines.detectors.deployment import detect_deployment
from repoprofiler.engines.detectors.endpoints import extract_api_endpoints
from repoprofiler.engines.detectors.env_vars import extract_env_variables
from repoprofiler.engines.detectors.result import Detection
from repoprofiler.engines.detectors.runner import DetectorResults, run_detectors
from repoprofiler.engines.detectors.testing import detect_test_config

__all__ = [
    "Detection",
    "DetectionContext",
    "DetectorResults",
    "detect_cicd",
    "detect_deployment",
    "detect_test_config",
    "extract_api_endpoints",
    "extract_env_variables",
    "run_detectors",
]
