# Services package
from stepkit.services.batcher import FailureMode, RangeBatcher
from stepkit.services.hybrid import HybridFetchOrchestrator
from stepkit.services.permissions import PermissionOrchestrator
from stepkit.services.realtime import RealtimeSessionManager
from stepkit.services.selection import classify, select_route
from stepkit.services.step_service import StepService, summarize

__all__ = [
    "FailureMode",
    "RangeBatcher",
    "HybridFetchOrchestrator",
    "PermissionOrchestrator",
    "RealtimeSessionManager",
    "classify",
    "select_route",
    "StepService",
    "summarize",
]
