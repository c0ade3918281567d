"""
HTTP client for the remote pose-analysis service.

One POST per sampled frame over a keep-alive ``requests.Session``.  Any
transport or server failure surfaces as ``AnalysisError`` so the caller
can show its retry banner and move on to the next tick.
"""

from __future__ import annotations

import requests

from session_state import AnalysisResult

ANALYZE_PATH = "/analyze"


class AnalysisError(RuntimeError):
    """The analysis call failed (network, HTTP status or bad body)."""


class AnalysisClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.url = base_url.rstrip("/") + ANALYZE_PATH
        self.timeout = timeout
        self._http = session or requests.Session()

    def analyze_frame(self, image_b64: str) -> AnalysisResult | None:
        """Submit one encoded frame.

        Returns None when the service answers with an empty body or JSON
        null, meaning there is nothing to apply for this tick.
        """
        try:
            response = self._http.post(
                self.url, json={"image": image_b64}, timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise AnalysisError(f"request failed: {type(exc).__name__}: {exc}") from exc

        if response.status_code >= 400:
            raise AnalysisError(f"server returned {response.status_code}")

        if not response.content or not response.content.strip():
            return None
        try:
            data = response.json()
        except ValueError as exc:
            raise AnalysisError("response is not JSON") from exc

        if data is None:
            return None
        if not isinstance(data, dict):
            raise AnalysisError(f"unexpected response type {type(data).__name__}")
        return AnalysisResult.from_json(data)

    def close(self) -> None:
        self._http.close()
