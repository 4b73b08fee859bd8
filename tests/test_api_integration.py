"""API integration tests for the docpress FastAPI application.

These tests use FastAPI TestClient with a lifecycle manager backed by a
temporary output directory and a fake clock.
"""

from datetime import timedelta
from pathlib import Path
from typing import Generator

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from docpress.api.app import create_app
from docpress.config import Settings
from docpress.files import FileLifecycle, OperationType


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def settings(output_dir: Path) -> Settings:
    return Settings(output_dir=output_dir, cleanup_interval_seconds=0)


@pytest.fixture
def client(settings: Settings, lifecycle: FileLifecycle) -> Generator[TestClient, None, None]:
    """Test client for an app sharing the test lifecycle manager."""
    app = create_app(settings=settings, lifecycle=lifecycle)
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# Root and Health
# =============================================================================


class TestRootEndpoint:
    """Tests for the root API endpoint."""

    def test_root_endpoint(self, client: TestClient) -> None:
        response = client.get("/")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["name"] == "docpress API"
        assert data["status"] == "operational"


class TestHealthEndpoint:
    """Tests for health endpoints."""

    def test_health_reports_tracked_files(
        self, client: TestClient, lifecycle: FileLifecycle, write_output
    ) -> None:
        lifecycle.register_artifact(write_output())
        response = client.get("/health")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["tracked_files"] == 1
        assert data["pending_deletions"] == 0

    def test_liveness(self, client: TestClient) -> None:
        response = client.get("/health/live")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["alive"] == "true"


# =============================================================================
# Download
# =============================================================================


class TestDownloadEndpoint:
    """Tests for GET /api/download/{filename}."""

    def test_streams_file(self, client: TestClient, lifecycle: FileLifecycle, write_output) -> None:
        content = b"%PDF-1.7 merged output"
        handle = lifecycle.register_artifact(write_output("m1.pdf", content))

        response = client.get(handle.download_url)

        assert response.status_code == status.HTTP_200_OK
        assert response.content == content
        assert response.headers["content-type"] == "application/octet-stream"
        assert response.headers["content-length"] == str(len(content))
        assert "attachment" in response.headers["content-disposition"]
        assert "m1.pdf" in response.headers["content-disposition"]

    def test_file_deleted_after_download(
        self, client: TestClient, lifecycle: FileLifecycle, write_output
    ) -> None:
        registration = write_output("gone.pdf")
        handle = lifecycle.register_artifact(registration)

        assert client.get(handle.download_url).status_code == status.HTTP_200_OK
        assert not registration.output_path.exists()

        response = client.get(handle.download_url)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_unknown_file(self, client: TestClient) -> None:
        response = client.get("/api/download/0b7c1c2e-never-registered.pdf")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        error = response.json()["error"]
        assert error["type"] == "not_found"
        assert error["message"] == "File not found or expired"

    def test_file_reclaimed_after_resolution(
        self, client: TestClient, lifecycle: FileLifecycle, output_dir: Path, monkeypatch
    ) -> None:
        monkeypatch.setattr(
            lifecycle, "resolve_for_download", lambda handle: output_dir / "reclaimed.pdf"
        )

        response = client.get("/api/download/reclaimed.pdf")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["type"] == "not_found"

    def test_traversal_rejected(self, client: TestClient, temp_dir: Path) -> None:
        (temp_dir / "secret.txt").write_text("nope")
        response = client.get("/api/download/..%2Fsecret.txt")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_request_id_header(self, client: TestClient) -> None:
        response = client.get("/", headers={"x-request-id": "req-42"})
        assert response.headers["x-request-id"] == "req-42"
        assert "x-process-time" in response.headers


# =============================================================================
# Records
# =============================================================================


class TestFileEndpoint:
    """Tests for GET /api/files/{file_id}."""

    def test_returns_record(self, client: TestClient, lifecycle: FileLifecycle, write_output) -> None:
        handle = lifecycle.register_artifact(
            write_output(operation=OperationType.PDF_TO_IMAGE, metadata={"dpi": 150})
        )

        response = client.get(f"/api/files/{handle.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == handle.id
        assert data["operation"] == "pdf-to-image"
        assert data["status"] == "completed"
        assert data["downloadUrl"] == handle.download_url
        assert data["metadata"] == {"dpi": 150}

    def test_unknown_record(self, client: TestClient) -> None:
        response = client.get("/api/files/missing")
        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Cleanup
# =============================================================================


class TestCleanupEndpoint:
    """Tests for POST /api/cleanup."""

    def test_nothing_to_clean(self, client: TestClient, lifecycle: FileLifecycle, write_output) -> None:
        lifecycle.register_artifact(write_output())
        response = client.post("/api/cleanup")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"cleaned": 0}

    def test_cleans_expired(
        self, client: TestClient, lifecycle: FileLifecycle, write_output, clock
    ) -> None:
        registration = write_output("stale.pdf")
        handle = lifecycle.register_artifact(registration)
        lifecycle.register_artifact(write_output("stale2.pdf"))
        clock.advance(minutes=16)

        response = client.post("/api/cleanup")

        assert response.json() == {"cleaned": 2}
        assert not registration.output_path.exists()
        assert client.get(handle.download_url).status_code == status.HTTP_404_NOT_FOUND
        assert client.get(f"/api/files/{handle.id}").status_code == status.HTTP_404_NOT_FOUND

    def test_second_cleanup_is_empty(
        self, client: TestClient, lifecycle: FileLifecycle, write_output, clock
    ) -> None:
        lifecycle.register_artifact(write_output())
        clock.advance(hours=1)
        assert client.post("/api/cleanup").json() == {"cleaned": 1}
        assert client.post("/api/cleanup").json() == {"cleaned": 0}


class TestLifespan:
    """Tests for lifecycle creation at startup."""

    def test_builds_lifecycle_from_settings(self, settings: Settings) -> None:
        app = create_app(settings=settings)
        with TestClient(app) as test_client:
            assert test_client.get("/health").json()["tracked_files"] == 0
            lifecycle = app.state.lifecycle
            assert lifecycle.output_dir == settings.output_dir
            assert lifecycle.ttl == timedelta(minutes=15)
            assert lifecycle.grace_seconds == 5.0


class TestErrorHandling:
    """Tests for error responses."""

    def test_transform_failure_maps_to_500(self, settings: Settings, lifecycle: FileLifecycle) -> None:
        app = create_app(settings=settings, lifecycle=lifecycle)

        @app.post("/api/split")
        async def split() -> dict:
            def broken():
                raise ValueError("bad page range")

            return lifecycle.run_transform(
                OperationType.SPLIT, broken, processed_name="split.zip"
            ).model_dump(by_alias=True)

        with TestClient(app) as test_client:
            response = test_client.post("/api/split")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"] == {
            "type": "transform_failed",
            "message": "Failed to process file",
            "detail": "split",
        }
        assert len(lifecycle.store) == 0
