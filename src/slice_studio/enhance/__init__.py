"""
Module: enhance

Purpose:
    Optional enhancement of processing-area slices through the
    generation backend's REST API.

Key Classes:
    - GenerationClient: Backend client (requests)
    - EnhanceConfig / ClientConfig: Settings

Key Functions:
    - enhance_processing_area(): Sequential enhancement run

Dependencies:
    - requests: HTTP
"""

from .client import Generation, GenerationClient, GenerationError
from .config import ClientConfig, EnhanceConfig
from .enhancer import EnhanceReport, enhance_processing_area, wait_for_generation

__all__ = [
    "Generation",
    "GenerationClient",
    "GenerationError",
    "ClientConfig",
    "EnhanceConfig",
    "EnhanceReport",
    "enhance_processing_area",
    "wait_for_generation",
]
