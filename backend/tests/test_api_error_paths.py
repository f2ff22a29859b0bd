import pytest
from fastapi.testclient import TestClient

_PNG = b"\x89PNG\r\n\x1a\nimage"


def _upload(client: TestClient, body: bytes, filename: str = "scan.png", content_type: str = "image/png"):
    return client.post(
        "/api/analysis/upload",
        params={"tool_type": "document", "filename": filename},
        content=body,
        headers={"content-type": content_type},
    )


def test_create_analysis_rejects_unknown_tool_type(api_client: TestClient) -> None:
    response = api_client.post("/api/analysis", json={"tool_type": "deepfake-audio"})
    assert response.status_code == 422


def test_create_analysis_rejects_unknown_fields(api_client: TestClient) -> None:
    response = api_client.post("/api/analysis", json={"tool_type": "document", "risk_score": 5})
    assert response.status_code == 422


@pytest.mark.parametrize(
    ("stage", "status_code", "detail"),
    [
        ("upload-url", 503, "Upload service temporarily unavailable"),
        ("analyze", 502, "Analysis failed. Please retry."),
    ],
)
def test_remote_stage_failures_map_to_gateway_errors(
    api_client: TestClient, fake_integrity_client, stage: str, status_code: int, detail: str
) -> None:
    fake_integrity_client.fail_stage = stage
    response = _upload(api_client, _PNG)
    assert response.status_code == status_code
    assert response.json()["detail"] == detail
    assert api_client.get("/api/stats").json()["total"] == 124
    assert api_client.get("/api/results").json()["count"] == 0


def test_repeated_upload_failure_returns_502(api_client: TestClient, fake_integrity_client) -> None:
    fake_integrity_client.upload_failures = 5
    response = _upload(api_client, _PNG)
    assert response.status_code == 502
    assert response.json()["detail"] == "Upload failed. Please retry."
    events = api_client.get("/api/audit").json()["events"]
    assert [event["type"] for event in events][-2:] == ["UPLOAD_RETRIED", "REMOTE_STAGE_FAILED"]


def test_upload_rejects_empty_body(api_client: TestClient) -> None:
    response = _upload(api_client, b"")
    assert response.status_code == 400
    assert response.json()["detail"] == "Uploaded file is empty."


def test_upload_rejects_oversized_body(api_client: TestClient, fake_integrity_client) -> None:
    response = _upload(api_client, b"x" * 2048)
    assert response.status_code == 413
    assert "exceeds" in response.json()["detail"]
    assert fake_integrity_client.calls == []


def test_upload_requires_filename(api_client: TestClient) -> None:
    response = api_client.post(
        "/api/analysis/upload",
        params={"tool_type": "document"},
        content=_PNG,
        headers={"content-type": "image/png"},
    )
    assert response.status_code == 422


def test_unknown_result_returns_404(api_client: TestClient) -> None:
    assert api_client.get("/api/results/41").status_code == 404
    assert api_client.get("/api/results/41/preview").status_code == 404
    response = api_client.post("/api/results/41/decision", json={"decision": "APPROVE"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Result not found: 41"


def test_simulated_result_has_no_preview(api_client: TestClient) -> None:
    result = api_client.post("/api/analysis", json={"tool_type": "document", "filename": "memo.txt"}).json()["result"]
    assert result["preview_url"] is None
    assert api_client.get(f"/api/results/{result['id']}/preview").status_code == 404


def test_decision_update_rejects_unknown_decision(api_client: TestClient) -> None:
    result = api_client.post("/api/analysis", json={"tool_type": "document"}).json()["result"]
    response = api_client.post(f"/api/results/{result['id']}/decision", json={"decision": "ESCALATE"})
    assert response.status_code == 422


def test_report_export_without_results_returns_409(api_client: TestClient) -> None:
    response = api_client.get("/api/report")
    assert response.status_code == 409
    assert response.json()["detail"] == "Nothing to export yet."
