"""Shared pytest fixtures for the docverify test suite."""

import httpx
import pytest


# ---------------------------------------------------------------------------
# Settings fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path):
    """Return a Settings instance isolated from any local .env file."""
    from config.settings import Settings
    return Settings(
        _env_file=None,
        lyzr_api_key="test-key",
        default_agent_id="agent-123",
        agent_api_url="https://agent.test/v3/inference/chat/",
        agent_stream_url="https://agent.test/v3/inference/stream/",
        upload_url="https://agent.test/v3/assets/upload",
        request_timeout=5.0,
        log_dir=tmp_path / "logs",
    )


# ---------------------------------------------------------------------------
# HTTP transport helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def make_client(settings):
    """Build an AgentClient whose requests are answered by ``handler``.

    Every request seen by the transport is appended to ``client.requests``.
    """
    from tools.agent_client import AgentClient

    def _make(handler, client_settings=None):
        seen = []

        def _recording_handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        client = AgentClient(client_settings or settings, transport=httpx.MockTransport(_recording_handler))
        client.requests = seen
        return client

    return _make


# ---------------------------------------------------------------------------
# Sample payloads
# ---------------------------------------------------------------------------

@pytest.fixture
def canonical_response():
    return {
        "status": "success",
        "result": {
            "document_type": "wire_confirmation",
            "checks": [{"name": "amount_present", "passed": True}],
        },
        "message": "Verification complete",
        "metadata": {"agent_name": "Wire Verifier", "timestamp": "2026-01-05T10:00:00Z"},
    }


@pytest.fixture
def sample_sse_stream():
    return (
        "event: chat_started\n"
        'data: {"request_id": "req-1"}\n'
        "\n"
        "event: tool_use\n"
        'data: {"tool_name": "ocr", "tool_input": {"page": 1}}\n'
        "\n"
        "event: tool_blocked\n"
        'data: {"type": "tool_blocked", "reason": "file too large"}\n'
        "\n"
        "data: [DONE]\n"
        "\n"
    )
