"""Tests for the FastAPI web adapter."""

import inspect

import pytest
from fastapi.testclient import TestClient

from web.app import app


@pytest.fixture
def client():
    return TestClient(app)


class TestRunEndpoint:
    """POST /api/run."""

    def test_run_program(self, client):
        """A program runs and returns its final state."""
        response = client.post(
            "/api/run",
            json={"program": "6005 6103 8014 1206", "options": {"frames": 1}},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["final_state"]["v"][0] == 8
        assert body["frames_executed"] == 1
        assert len(body["display"]) == 32

    def test_run_error(self, client):
        """Faults are reported in the body, not as HTTP errors."""
        response = client.post("/api/run", json={"program": "5FFF"})
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "error"
        assert body["error"]["type"] == "UnsupportedOpcode"
        assert body["error"]["word"] == 0x5FFF

    def test_run_trace(self, client):
        """Trace rows are returned when requested."""
        response = client.post(
            "/api/run",
            json={"program": "1200", "options": {"frames": 1, "trace": True, "trace_limit": 3}},
        )
        body = response.json()
        assert len(body["trace"]) == 3
        assert body["trace"][0]["instr_text"] == "JP 0x200"

    def test_invalid_hex(self, client):
        """Malformed hex is rejected."""
        response = client.post("/api/run", json={"program": "60G5"})
        assert response.status_code == 400

    def test_program_too_large(self, client):
        """Programs larger than the free memory are rejected."""
        response = client.post("/api/run", json={"program": "00" * 3585})
        assert response.status_code == 400

    def test_invalid_options(self, client):
        """Option bounds are validated."""
        response = client.post("/api/run", json={"program": "1200", "options": {"frames": 0}})
        assert response.status_code == 422


class TestDisassembleEndpoint:
    """POST /api/disassemble."""

    def test_disassemble(self, client):
        """Each word is listed with its text."""
        response = client.post("/api/disassemble", json={"program": "00E0 A2F0 5FFF"})
        assert response.status_code == 200
        lines = response.json()["lines"]
        assert [line["text"] for line in lines] == ["CLS", "LD I, 0x2f0", "DW 0x5fff"]
        assert lines[1] == {"addr": 0x202, "word": "A2F0", "text": "LD I, 0x2f0"}

    def test_start_address(self, client):
        """Listing addresses start where asked."""
        response = client.post(
            "/api/disassemble",
            json={"program": "00EE", "start_address": 0x300},
        )
        assert response.json()["lines"][0]["addr"] == 0x300


class TestAppSetup:
    """Application wiring."""

    def test_handlers_run_in_threadpool(self):
        """Endpoints are plain functions so long runs stay off the event loop."""
        from web.app import run_code, disassemble_code
        assert not inspect.iscoroutinefunction(run_code)
        assert not inspect.iscoroutinefunction(disassemble_code)

    def test_no_static_root(self, client):
        """Only the API routes are served."""
        assert client.get("/").status_code == 404
