"""Tests for the operations router."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.models.domain.performance import Metric
from core.utils import utc_now


def add_metric(app: FastAPI, operation: str, duration_ms: float) -> None:
    now = utc_now()
    app.state.monitor.record(
        Metric(
            operation_id=f"{operation}_1",
            operation=operation,
            subject_id="1",
            start_time=now,
            end_time=now,
            duration_ms=duration_ms,
        )
    )


def test_scheduler_stats(client: TestClient):
    """Test an idle scheduler."""
    response = client.get("/v1/ops/scheduler")
    assert response.status_code == 200

    data = response.json()
    assert data["is_processing"] is False
    assert data["queue_size"] == 0
    assert data["active_jobs"] == 0


def test_clear_scheduler(client: TestClient):
    response = client.post("/v1/ops/scheduler/clear")
    assert response.status_code == 200
    assert response.json() == {"rejected": 0}


def test_performance_stats(client: TestClient, test_app: FastAPI):
    """Test aggregate stats over recorded metrics."""
    add_metric(test_app, "portfolio", 500)
    add_metric(test_app, "portfolio", 1500)

    data = client.get("/v1/ops/performance").json()

    assert data["total"] == 2
    assert data["mean_ms"] == 1000
    assert data["slow_count"] == 1
    assert data["operations"]["portfolio"]["max_ms"] == 1500


def test_performance_report_and_slowest(client: TestClient, test_app: FastAPI):
    add_metric(test_app, "portfolio", 1200)
    add_metric(test_app, "price_quote", 3000)

    report = client.get("/v1/ops/performance/report").json()
    slowest = client.get("/v1/ops/performance/slowest", params={"limit": 1}).json()

    assert report["summary"]["total"] == 2
    assert report["recommendations"]
    assert [entry["operation"] for entry in slowest] == ["price_quote"]


def test_update_threshold(client: TestClient, test_app: FastAPI):
    """Test changing the slow-operation threshold."""
    response = client.put("/v1/ops/performance/threshold", json={"threshold_ms": 250})
    assert response.status_code == 200
    assert response.json() == {"threshold_ms": 250.0}
    assert test_app.state.monitor.threshold_ms == 250.0

    response = client.put("/v1/ops/performance/threshold", json={"threshold_ms": 0})
    assert response.status_code == 400


def test_clear_performance(client: TestClient, test_app: FastAPI):
    add_metric(test_app, "portfolio", 100)

    response = client.post("/v1/ops/performance/clear")

    assert response.status_code == 204
    assert client.get("/v1/ops/performance").json()["total"] == 0


def test_jobs(client: TestClient):
    """Test periodic job status reporting."""
    response = client.get("/v1/ops/jobs")
    assert response.status_code == 200

    jobs = response.json()
    assert [job["name"] for job in jobs] == ["performance-summary"]
    assert jobs[0]["status"] == "running"
