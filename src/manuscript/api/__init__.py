"""Public API surface for HTTP serving and Python-first interfaces."""

from manuscript.api.app import create_app
from manuscript.api.contracts import EditorStateResponse, InspectorResponse, PanelsResponse
from manuscript.api.python_interface import EditorApiClient

__all__ = [
    "EditorApiClient",
    "EditorStateResponse",
    "InspectorResponse",
    "PanelsResponse",
    "create_app",
]
