import random
from dataclasses import replace
from typing import Any

import pytest
from fastapi.testclient import TestClient

from backend.api.main import app
from backend.internal_core.config import DemoConfig
from backend.internal_core.result_store import InMemoryResultStore
from backend.remote.integrity_client import RemoteStageError, UploadTarget
from backend.workflow.runner import AnalysisWorkflow


class FakeIntegrityClient:
    def __init__(self) -> None:
        self.risk_score = 42
        self.fail_stage: str | None = None
        self.upload_failures = 0
        self.calls: list[tuple[str, Any]] = []

    def request_upload_url(self) -> UploadTarget:
        self.calls.append(("upload-url", None))
        if self.fail_stage == "upload-url":
            raise RemoteStageError("upload-url", "Failed to request upload URL")
        return UploadTarget(upload_url="https://storage.test/put/abc", key="uploads/abc.png")

    def upload_object(self, upload_url: str, data: bytes, content_type: str | None = None) -> None:
        self.calls.append(("s3-upload", (upload_url, len(data), content_type)))
        if self.upload_failures > 0:
            self.upload_failures -= 1
            raise RemoteStageError("s3-upload", "Failed to upload to S3")

    def analyze_object(self, key: str) -> int:
        self.calls.append(("analyze", key))
        if self.fail_stage == "analyze":
            raise RemoteStageError("analyze", "Invalid analysis response")
        return self.risk_score

    def stages(self) -> list[str]:
        return [stage for stage, _ in self.calls]


@pytest.fixture
def demo_config() -> DemoConfig:
    return DemoConfig(
        REAGVIS_APP_NAME="Reagvis Labs Pvt. Ltd.",
        REAGVIS_API_BASE_URL="https://integrity.test/prod",
        REAGVIS_ANALYZE_BUCKET="demo-bucket",
        REAGVIS_MIN_DELAY_MS=0,
        REAGVIS_SIMULATED_LATENCY_MS=0,
        REAGVIS_HTTP_TIMEOUT_SECONDS=2.0,
        REAGVIS_UPLOAD_RETRIES=1,
        REAGVIS_DEMO_OVERRIDES=True,
        REAGVIS_RANDOM_SEED=7,
        REAGVIS_INITIAL_TOTAL=124,
        REAGVIS_INITIAL_REJECTED=12,
        REAGVIS_INITIAL_MANUAL=5,
        REAGVIS_INITIAL_APPROVED=107,
        REAGVIS_MAX_UPLOAD_BYTES=1024,
        REAGVIS_LOG_LEVEL="INFO",
    )


@pytest.fixture
def fake_integrity_client() -> FakeIntegrityClient:
    return FakeIntegrityClient()


@pytest.fixture
def config_factory(demo_config: DemoConfig):
    def _build(**overrides: Any) -> DemoConfig:
        return replace(demo_config, **overrides)

    return _build


@pytest.fixture
def api_client(demo_config: DemoConfig, fake_integrity_client: FakeIntegrityClient):
    app.state.config = demo_config
    app.state.workflow = AnalysisWorkflow(
        InMemoryResultStore(demo_config.initial_stats()),
        demo_config,
        fake_integrity_client,  # type: ignore[arg-type]
        rng=random.Random(7),
    )
    try:
        yield TestClient(app)
    finally:
        for name in ("config", "workflow"):
            if hasattr(app.state, name):
                delattr(app.state, name)
