from __future__ import annotations

import base64
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config.loader import AIConfig

"""HTTP client for the generateContent endpoint of the Gemini API.

Errors:
- NetworkError: connection failure, timeout, retries exhausted
- ApiError: non-2xx response
- MalformedResponseError: ``candidates[0].content.parts[0].text`` missing
"""

logger = logging.getLogger(__name__)

__all__ = [
    "AIError",
    "NetworkError",
    "ApiError",
    "MalformedResponseError",
    "ImagePayload",
    "GeminiClient",
    "load_image",
]

RETRY_STATUSES = (429, 500, 502, 503, 504)


class AIError(Exception):
    """Base exception for generative-AI failures."""


class NetworkError(AIError):
    pass


class ApiError(AIError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(AIError):
    pass


@dataclass(frozen=True)
class ImagePayload:
    """Base64 image data sent inline with a prompt."""
    data: str
    mime_type: str


def load_image(path: Path) -> ImagePayload:
    """Read an image file into an ImagePayload.

    Raises:
        ValueError: the file is not an image (by extension)
        OSError: the file cannot be read
    """
    mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type or not mime_type.startswith("image/"):
        raise ValueError(f"please upload a valid image file (jpg, png, etc.): {path.name}")
    data = base64.b64encode(path.read_bytes()).decode("ascii")
    return ImagePayload(data=data, mime_type=mime_type)


def _http_session(retries: int, backoff: float) -> requests.Session:
    s = requests.Session()
    r = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=backoff,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=frozenset(["POST"]),
        raise_on_status=False,
    )
    s.mount("https://", HTTPAdapter(max_retries=r))
    s.mount("http://", HTTPAdapter(max_retries=r))
    return s


def _extract_text(body: Any) -> str:
    try:
        text = body["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError("invalid response structure from AI") from e
    if not isinstance(text, str) or not text:
        raise MalformedResponseError("invalid response structure from AI")
    return text


class GeminiClient:
    """Minimal text/image completion client with timeout and retry policy."""

    def __init__(self, api_key: str, config: AIConfig | None = None, session: requests.Session | None = None) -> None:
        self.api_key = api_key
        self.config = config or AIConfig()
        self.session = session or _http_session(self.config.retries, self.config.backoff_factor)

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url}/models/{self.config.model}:generateContent"

    def build_payload(
        self, prompt: str, *, system_prompt: str | None = None, image: ImagePayload | None = None
    ) -> dict[str, Any]:
        parts: list[dict[str, Any]] = [{"text": prompt}]
        if image is not None:
            parts.append({"inlineData": {"mimeType": image.mime_type, "data": image.data}})
        payload: dict[str, Any] = {"contents": [{"role": "user", "parts": parts}]}
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}
        return payload

    def generate(self, prompt: str, *, system_prompt: str | None = None, image: ImagePayload | None = None) -> str:
        """Send one prompt (optionally with an image) and return the reply text."""
        payload = self.build_payload(prompt, system_prompt=system_prompt, image=image)
        logger.debug(f"POST {self.endpoint} image={image is not None}")
        try:
            resp = self.session.post(
                self.endpoint,
                params={"key": self.api_key},
                json=payload,
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            raise NetworkError(f"request to generative AI failed: {e}") from e

        if not resp.ok:
            message = f"API Error: {resp.status_code}"
            try:
                detail = resp.json().get("error", {}).get("message")
                if detail:
                    message = detail
            except (ValueError, AttributeError):
                pass
            raise ApiError(message, status_code=resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            raise MalformedResponseError("response is not JSON") from e
        return _extract_text(body)
