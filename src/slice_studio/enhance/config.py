"""
Module: enhance.config

Purpose:
    Configuration dataclasses for slice enhancement: backend connection
    settings and the enhancement request parameters.

Key Classes:
    - ClientConfig: Backend base URL, token, timeout
    - EnhanceConfig: Model, prompt, output size, polling

Dependencies:
    - dataclasses (std)
    - os (std): Environment lookup

Used By:
    - enhance.client: GenerationClient
    - enhance.enhancer: enhance_processing_area()
    - cli: --enhance flags
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

API_BASE_ENV = "SLICE_STUDIO_API_BASE"
TOKEN_ENV = "SLICE_STUDIO_TOKEN"

DEFAULT_MODEL = "nano-banana"
DEFAULT_PROMPT = (
    "Keep the original composition and subject unchanged. Only improve "
    "clarity and detail: denoise, enhance texture and sharpness. Do not add "
    "elements or change the style."
)
IMAGE_SIZE_OPTIONS = ("1K", "2K", "4K")
ASPECT_RATIO_OPTIONS = ("auto", "1:1", "3:4", "4:3", "9:16", "16:9")


@dataclass(frozen=True)
class ClientConfig:
    """
    Connection settings for the generation backend.

    Attributes:
        api_base: Base URL, e.g. "https://studio.example.com" (no trailing slash)
        token: Bearer token, or None for anonymous access
        request_timeout: Per-request timeout in seconds
    """
    api_base: str
    token: Optional[str] = None
    request_timeout: float = 60.0

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.api_base:
            raise ValueError("api_base must be set")
        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive: {self.request_timeout}")
        object.__setattr__(self, "api_base", self.api_base.rstrip("/"))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
        """
        Read SLICE_STUDIO_API_BASE and SLICE_STUDIO_TOKEN.

        Raises:
            ValueError: If the base URL is not set
        """
        env = os.environ if environ is None else environ
        return cls(
            api_base=env.get(API_BASE_ENV, ""),
            token=env.get(TOKEN_ENV) or None,
        )


@dataclass(frozen=True)
class EnhanceConfig:
    """
    Enhancement request settings (immutable).

    Attributes:
        model: Generation model id
        prompt: Instruction sent with each slice
        image_size: Output size, one of 1K / 2K / 4K
        aspect_ratio: Output aspect, "auto" keeps the slice's own
        poll_interval: Seconds between status checks
        max_attempts: Status checks before giving up
    """
    model: str = DEFAULT_MODEL
    prompt: str = DEFAULT_PROMPT
    image_size: str = "1K"
    aspect_ratio: str = "auto"
    poll_interval: float = 2.0
    max_attempts: int = 90

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.model:
            raise ValueError("model must be set")
        if self.image_size not in IMAGE_SIZE_OPTIONS:
            raise ValueError(
                f"image_size must be one of {IMAGE_SIZE_OPTIONS}: {self.image_size!r}"
            )
        if self.aspect_ratio not in ASPECT_RATIO_OPTIONS:
            raise ValueError(
                f"aspect_ratio must be one of {ASPECT_RATIO_OPTIONS}: {self.aspect_ratio!r}"
            )
        if self.poll_interval < 0:
            raise ValueError(f"poll_interval must be non-negative: {self.poll_interval}")
        if self.max_attempts <= 0:
            raise ValueError(f"max_attempts must be positive: {self.max_attempts}")
