from __future__ import annotations

"""
Client for the hosted document-integrity API used by document image uploads.

Flow: request a presigned upload URL, PUT the bytes to object storage, then
ask the analyzer to score the stored object. Each step fails with a
`RemoteStageError` tagged by stage so callers can tell users which step broke.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Literal

import requests

RemoteStage = Literal["upload-url", "s3-upload", "analyze"]

logger = logging.getLogger(__name__)


class RemoteStageError(RuntimeError):
    def __init__(self, stage: RemoteStage, message: str):
        super().__init__(message)
        self.stage = stage
        self.message = message


@dataclass(frozen=True)
class UploadTarget:
    upload_url: str
    key: str


class IntegrityClient:
    def __init__(
        self,
        base_url: str,
        bucket: str,
        *,
        timeout_sec: float = 30.0,
        session: requests.Session | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._bucket = bucket
        self._timeout_sec = timeout_sec
        self._session = session or requests.Session()

    def request_upload_url(self) -> UploadTarget:
        try:
            response = self._session.post(
                f"{self._base_url}/get-upload-url",
                timeout=self._timeout_sec,
            )
        except requests.exceptions.RequestException as exc:
            logger.error("Upload URL request failed: %s", exc)
            raise RemoteStageError("upload-url", "Failed to request upload URL") from exc

        if not response.ok:
            raise RemoteStageError("upload-url", "Failed to request upload URL")

        data = _json_or_none(response)
        upload_url = data.get("upload_url") if isinstance(data, dict) else None
        key = data.get("key") if isinstance(data, dict) else None
        if not upload_url or not key:
            raise RemoteStageError("upload-url", "Invalid upload URL response")
        return UploadTarget(upload_url=str(upload_url), key=str(key))

    def upload_object(self, upload_url: str, data: bytes, content_type: str | None = None) -> None:
        try:
            response = self._session.put(
                upload_url,
                data=data,
                headers={"Content-Type": content_type or "application/octet-stream"},
                timeout=self._timeout_sec,
            )
        except requests.exceptions.RequestException as exc:
            logger.error("Object upload failed: %s", exc)
            raise RemoteStageError("s3-upload", "Failed to upload to S3") from exc

        if not response.ok:
            raise RemoteStageError("s3-upload", "Failed to upload to S3")

    def analyze_object(self, key: str) -> int:
        try:
            response = self._session.post(
                f"{self._base_url}/analyze",
                json={"bucket": self._bucket, "key": key},
                headers={"Content-Type": "application/json"},
                timeout=self._timeout_sec,
            )
        except requests.exceptions.RequestException as exc:
            logger.error("Analyze request failed: %s", exc)
            raise RemoteStageError("analyze", "Failed to analyze uploaded file") from exc

        if not response.ok:
            raise RemoteStageError("analyze", "Failed to analyze uploaded file")

        data = _json_or_none(response)
        risk_score = data.get("risk_score") if isinstance(data, dict) else None
        if isinstance(risk_score, bool) or not isinstance(risk_score, (int, float)):
            raise RemoteStageError("analyze", "Invalid analysis response")
        if not math.isfinite(risk_score):
            raise RemoteStageError("analyze", "Invalid analysis response")
        # Tier table is defined on 0..100.
        return max(0, min(100, int(round(risk_score))))


def _json_or_none(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
