"""Map view synchronization: lifecycle, camera reconciliation, focus and markers."""

from .camera import CameraReconciler
from .engine import MapViewEngine
from .focus import FocusFollowController
from .gestures import GestureListener
from .lifecycle import MapLifecycle, MapWidget
from .markers import MarkerRenderer, MarkerSpec, PopupContent, build_marker_specs

__all__ = [
    "CameraReconciler",
    "FocusFollowController",
    "GestureListener",
    "MapLifecycle",
    "MapViewEngine",
    "MapWidget",
    "MarkerRenderer",
    "MarkerSpec",
    "PopupContent",
    "build_marker_specs",
]
