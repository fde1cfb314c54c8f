"""Python client for the GetCampWood API."""

from .api import ApiError, CampWoodClient
from .markers import Marker, to_feature_collection, to_markers
from .session import AuthSnapshot, AuthState

__all__ = [
    "ApiError",
    "AuthSnapshot",
    "AuthState",
    "CampWoodClient",
    "Marker",
    "to_feature_collection",
    "to_markers",
]
