"""
Module: enhance.client

Purpose:
    Minimal client for the generation backend's REST API: submit an
    image generation with ordered reference images, read generation
    status, and download stored output files.

Key Classes:
    - GenerationClient: requests-based API client
    - Generation: Parsed generation status
    - GenerationError: Backend or transport failure

Dependencies:
    - requests: HTTP session
    - enhance.config: ClientConfig

Used By:
    - enhance.enhancer: Enhancement loop
"""

from __future__ import annotations

import base64
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urlencode

import requests

from .config import ClientConfig

logger = logging.getLogger(__name__)

_CREDITS_PATTERN = re.compile(r"insufficient credits", re.IGNORECASE)


class GenerationError(Exception):
    """Generation request failed."""
    pass


@dataclass(frozen=True)
class Generation:
    """
    Status of one backend generation.

    Attributes:
        id: Generation id
        status: "queued", "running", "succeeded" or "failed"
        progress: Raw progress as reported (ratio or percentage), if any
        error: Failure text, if any
        output_file_id: Stored output file id once succeeded
        model: Model that ran the generation
    """
    id: str
    status: str
    progress: Optional[float] = None
    error: Optional[str] = None
    output_file_id: Optional[str] = None
    model: Optional[str] = None

    @property
    def is_finished(self) -> bool:
        return self.status in ("succeeded", "failed")

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded" and bool(self.output_file_id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Generation:
        output = data.get("outputFile") or {}
        progress = data.get("progress")
        return cls(
            id=str(data["id"]),
            status=str(data.get("status", "queued")),
            progress=float(progress) if isinstance(progress, (int, float)) else None,
            error=data.get("error") or data.get("failureReason") or data.get("failure_reason"),
            output_file_id=output.get("id") if isinstance(output, dict) else None,
            model=data.get("model"),
        )


def to_data_url(data: bytes, mime_type: str = "image/png") -> str:
    """Encode bytes as a base64 data URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def normalize_error_message(message: str) -> str:
    if _CREDITS_PATTERN.search(message):
        return "API balance is insufficient"
    return message


class GenerationClient:
    """
    REST client for the generation backend.

    Example:
        >>> client = GenerationClient(ClientConfig("https://studio.example.com", token="t"))
        >>> created = client.generate_image(
        ...     prompt="sharpen", model="nano-banana", image_size="1K",
        ...     aspect_ratio="auto", references=[png_bytes],
        ... )
        >>> client.get_generation(created[0].id).status
        'running'
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None) -> None:
        self._config = config
        self._session = session or requests.Session()
        if config.token:
            self._session.headers.update({"Authorization": f"Bearer {config.token}"})

    @property
    def config(self) -> ClientConfig:
        return self._config

    def url(self, path: str) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self._config.api_base}{path}"

    def build_file_url(
        self,
        file_id: str,
        *,
        download: bool = False,
        thumb: bool = False,
        filename: Optional[str] = None,
    ) -> str:
        """URL of a stored file; the token travels as a query parameter."""
        params: Dict[str, str] = {}
        if self._config.token:
            params["token"] = self._config.token
        if download:
            params["download"] = "1"
        if thumb:
            params["thumb"] = "1"
        if filename:
            params["filename"] = filename
        path = f"/api/files/{file_id}"
        if params:
            path = f"{path}?{urlencode(params)}"
        return self.url(path)

    # ─────────────────────────────────────────────────────────────────────────
    # Endpoints
    # ─────────────────────────────────────────────────────────────────────────

    def generate_image(
        self,
        *,
        prompt: str,
        model: str,
        image_size: str,
        aspect_ratio: str,
        references: Sequence[bytes] = (),
        reference_file_ids: Sequence[str] = (),
        batch: int = 1,
    ) -> List[Generation]:
        """
        Start an image generation.

        Stored references (file ids) come first, then uploaded bytes, in
        the order given; the backend treats the list as ordered.

        Returns:
            Generations created by the request

        Raises:
            GenerationError: On HTTP or transport failure
        """
        reference_list = [{"type": "fileId", "value": fid} for fid in reference_file_ids]
        reference_list += [{"type": "base64", "value": to_data_url(ref)} for ref in references]
        payload = {
            "prompt": prompt,
            "model": model,
            "imageSize": image_size,
            "aspectRatio": aspect_ratio,
            "batch": batch,
            "referenceList": reference_list,
        }
        logger.debug(f"Submitting generation with model {model} and {len(reference_list)} references")
        data = self._request("POST", "/api/generate/image", json=payload)
        created = data.get("created") or []
        return [Generation.from_dict(item) for item in created]

    def get_generation(self, generation_id: str) -> Generation:
        data = self._request("GET", f"/api/generations/{generation_id}")
        return Generation.from_dict(data)

    def list_generations(
        self,
        *,
        generation_type: Optional[str] = "image",
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Generation]:
        """Recent generations, newest first as returned by the backend."""
        params: Dict[str, Any] = {}
        if generation_type:
            params["type"] = generation_type
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset
        data = self._request("GET", "/api/generations", params=params)
        return [Generation.from_dict(item) for item in data.get("items") or []]

    def download_file(self, file_id: str) -> bytes:
        """Raw bytes of a stored file."""
        response = self._send("GET", f"/api/files/{file_id}")
        return response.content

    # ─────────────────────────────────────────────────────────────────────────
    # Transport
    # ─────────────────────────────────────────────────────────────────────────

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        try:
            response = self._session.request(
                method, self.url(path), timeout=self._config.request_timeout, **kwargs
            )
        except requests.RequestException as e:
            raise GenerationError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            message = f"Request failed ({response.status_code})"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                message = body.get("error") or body.get("message") or message
            raise GenerationError(normalize_error_message(str(message)))
        return response

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        response = self._send(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise GenerationError(f"{method} {path} returned invalid JSON") from e
