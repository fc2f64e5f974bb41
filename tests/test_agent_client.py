"""Tests for the agent HTTP facade."""

import json

import httpx
import pytest


def _json_handler(body, status_code=200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=body if isinstance(body, str) else json.dumps(body))
    return handler


class TestCallAgent:
    @pytest.mark.asyncio
    async def test_success_is_normalized(self, make_client, canonical_response):
        client = make_client(_json_handler(canonical_response))
        result = await client.call_agent("Verify the wire", "agent-1")
        assert result.success is True
        assert result.response.to_dict() == canonical_response
        assert result.agent_id == "agent-1"
        assert result.parse_strategy == "direct"
        assert result.timestamp
        assert client.total_calls == 1

    @pytest.mark.asyncio
    async def test_request_payload_and_headers(self, make_client):
        client = make_client(_json_handler({"result": {}}))
        await client.call_agent("hello", "agent-1", assets=["asset-a", "asset-b"])
        request = client.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://agent.test/v3/inference/chat/"
        assert request.headers["x-api-key"] == "test-key"
        body = json.loads(request.content)
        assert body["message"] == "hello"
        assert body["agent_id"] == "agent-1"
        assert body["assets"] == ["asset-a", "asset-b"]
        assert body["user_id"].startswith("user-")
        assert body["session_id"].startswith("agent-1-")
        assert len(body["session_id"]) == len("agent-1-") + 12

    @pytest.mark.asyncio
    async def test_ids_echoed_back(self, make_client):
        client = make_client(_json_handler({"result": {}}))
        result = await client.call_agent("hi", "agent-1", user_id="u1", session_id="s1")
        body = json.loads(client.requests[0].content)
        assert (body["user_id"], body["session_id"]) == ("u1", "s1")
        assert (result.user_id, result.session_id) == ("u1", "s1")
        assert "assets" not in body

    @pytest.mark.asyncio
    async def test_default_agent_id_used(self, make_client):
        client = make_client(_json_handler({"result": {}}))
        result = await client.call_agent("hi")
        assert result.agent_id == "agent-123"

    @pytest.mark.asyncio
    async def test_missing_agent_id_raises(self, make_client, settings):
        from config.exceptions import InvalidConfigError
        client = make_client(_json_handler({}), settings.model_copy(update={"default_agent_id": None}))
        with pytest.raises(InvalidConfigError):
            await client.call_agent("hi")

    @pytest.mark.asyncio
    async def test_prose_wrapped_json_is_recovered(self, make_client):
        client = make_client(_json_handler('Here you go: {"status": "success", "result": {"ok": true}}'))
        result = await client.call_agent("hi")
        assert result.success is True
        assert result.response.result == {"ok": True}
        assert result.parse_strategy == "extracted"

    @pytest.mark.asyncio
    async def test_unparseable_reply_is_failure(self, make_client):
        client = make_client(_json_handler("I could not read the document."))
        result = await client.call_agent("hi")
        assert result.success is False
        assert result.response.status == "error"
        assert result.response.result == {}
        assert result.raw_response == "I could not read the document."
        assert result.parse_strategy == "raw_fallback"

    @pytest.mark.asyncio
    async def test_http_error_message_from_body(self, make_client):
        client = make_client(_json_handler({"detail": "Invalid API key"}, status_code=401))
        result = await client.call_agent("hi")
        assert result.success is False
        assert result.error == "Invalid API key"
        assert result.response.message == "Invalid API key"

    @pytest.mark.asyncio
    async def test_http_error_default_message(self, make_client):
        client = make_client(_json_handler("<html>Bad gateway</html>", status_code=502))
        result = await client.call_agent("hi")
        assert result.error == "API returned status 502"

    @pytest.mark.asyncio
    async def test_failures_echo_request_ids(self, make_client):
        client = make_client(_json_handler({"error": "busy"}, status_code=503))
        result = await client.call_agent("hi", user_id="u1", session_id="s1")
        assert result.success is False
        assert (result.user_id, result.session_id) == ("u1", "s1")

    @pytest.mark.asyncio
    async def test_generated_ids_returned_on_parse_failure(self, make_client):
        client = make_client(_json_handler("no structure here"))
        result = await client.call_agent("hi")
        body = json.loads(client.requests[0].content)
        assert result.success is False
        assert result.user_id == body["user_id"]
        assert result.session_id == body["session_id"]

    @pytest.mark.asyncio
    async def test_deeply_nested_reply_is_normalized(self, make_client):
        body = '{"response": ' * 600 + '"deep"' + "}" * 600
        client = make_client(_json_handler(body))
        result = await client.call_agent("hi")
        assert result.success is True
        assert result.response.result == {"text": "deep"}

    @pytest.mark.asyncio
    async def test_transport_error_becomes_failure(self, make_client):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client = make_client(handler)
        result = await client.call_agent("hi")
        assert result.success is False
        assert "Connection refused" in result.error
        assert result.response.is_error


class TestCallAgentJson:
    @pytest.mark.asyncio
    async def test_returns_result(self, make_client):
        client = make_client(_json_handler({"status": "success", "result": {"score": 9}}))
        assert await client.call_agent_json("hi") == {"score": 9}

    @pytest.mark.asyncio
    async def test_error_status_raises(self, make_client):
        from config.exceptions import AgentError
        client = make_client(_json_handler({"status": "error", "result": {}, "message": "unreadable scan"}))
        with pytest.raises(AgentError, match="unreadable scan"):
            await client.call_agent_json("hi")

    @pytest.mark.asyncio
    async def test_failed_call_raises(self, make_client):
        from config.exceptions import AgentError
        client = make_client(_json_handler("nothing useful"))
        with pytest.raises(AgentError, match="All parsing strategies failed"):
            await client.call_agent_json("hi")


class TestStreamAgent:
    @pytest.mark.asyncio
    async def test_events_in_order(self, make_client, sample_sse_stream):
        client = make_client(lambda request: httpx.Response(
            200, text=sample_sse_stream, headers={"content-type": "text/event-stream"},
        ))
        seen = []
        events = await client.stream_agent("hi", on_event=seen.append)
        assert [e.event_type for e in events] == ["chat_started", "tool_use", "tool_blocked", "chat_completed"]
        assert seen == events
        assert str(client.requests[0].url) == "https://agent.test/v3/inference/stream/"

    @pytest.mark.asyncio
    async def test_request_id_back_filled(self, make_client):
        client = make_client(lambda request: httpx.Response(200, text='data: {"step": 1}\n\n'))
        events = await client.stream_agent("hi")
        assert events[0].event["request_id"]

    @pytest.mark.asyncio
    async def test_trailing_frame_flushed(self, make_client):
        client = make_client(lambda request: httpx.Response(200, text='event: status_update\ndata: {"p": 1}'))
        events = await client.stream_agent("hi")
        assert len(events) == 1
        assert events[0].event_type == "status_update"

    @pytest.mark.asyncio
    async def test_http_error_yields_chat_failed(self, make_client):
        client = make_client(_json_handler({"error": "agent not found"}, status_code=404))
        events = await client.stream_agent("hi")
        assert len(events) == 1
        assert events[0].event_type == "chat_failed"
        assert events[0].event["error"] == "agent not found"

    @pytest.mark.asyncio
    async def test_transport_error_yields_chat_failed(self, make_client):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)
        events = await client.stream_agent("hi")
        assert events[-1].event_type == "chat_failed"
        assert "timed out" in events[-1].event["error"]


class TestUploadFiles:
    @pytest.mark.asyncio
    async def test_upload_collects_asset_ids(self, make_client, tmp_path):
        doc = tmp_path / "wire.pdf"
        doc.write_bytes(b"%PDF-1.4 test")
        body = {
            "results": [
                {"asset_id": "as-1", "file_name": "wire.pdf", "success": True},
            ],
            "total_files": 1,
            "successful_uploads": 1,
            "failed_uploads": 0,
        }
        client = make_client(_json_handler(body))
        result = await client.upload_files([doc])
        assert result.success is True
        assert result.asset_ids == ["as-1"]
        assert result.files[0].file_name == "wire.pdf"
        assert result.message == "Successfully uploaded 1 file(s)"
        request = client.requests[0]
        assert request.headers["x-api-key"] == "test-key"
        assert request.headers["content-type"].startswith("multipart/form-data")

    @pytest.mark.asyncio
    async def test_failed_entries_excluded(self, make_client, tmp_path):
        a = tmp_path / "a.png"
        b = tmp_path / "b.png"
        a.write_bytes(b"a")
        b.write_bytes(b"b")
        body = {"results": [
            {"asset_id": "as-a", "file_name": "a.png"},
            {"asset_id": "", "file_name": "b.png", "success": False, "error": "too big"},
        ]}
        client = make_client(_json_handler(body))
        result = await client.upload_files([a, b])
        assert result.asset_ids == ["as-a"]
        assert result.total_files == 2
        assert result.files[1].error == "too big"

    @pytest.mark.asyncio
    async def test_no_files(self, make_client):
        client = make_client(_json_handler({}))
        result = await client.upload_files([])
        assert result.success is False
        assert result.error == "No files provided"
        assert client.requests == []

    @pytest.mark.asyncio
    async def test_missing_api_key(self, make_client, settings, tmp_path):
        doc = tmp_path / "d.txt"
        doc.write_text("x")
        client = make_client(_json_handler({}), settings.model_copy(update={"lyzr_api_key": ""}))
        result = await client.upload_files([doc])
        assert result.success is False
        assert "LYZR_API_KEY" in result.error
        assert result.failed_uploads == 1

    @pytest.mark.asyncio
    async def test_missing_file(self, make_client, tmp_path):
        client = make_client(_json_handler({}))
        result = await client.upload_files([tmp_path / "absent.pdf"])
        assert result.success is False
        assert client.requests == []

    @pytest.mark.asyncio
    async def test_http_failure(self, make_client, tmp_path):
        doc = tmp_path / "d.txt"
        doc.write_text("x")
        client = make_client(_json_handler("quota exceeded", status_code=429))
        result = await client.upload_files([doc])
        assert result.success is False
        assert result.message == "Upload failed with status 429"
        assert result.error == "quota exceeded"

    @pytest.mark.asyncio
    async def test_unsupported_type_rejected_before_upload(self, make_client, tmp_path):
        doc = tmp_path / "wire.pdf"
        doc.write_bytes(b"%PDF")
        archive = tmp_path / "bundle.zip"
        archive.write_bytes(b"PK")
        client = make_client(_json_handler({}))
        result = await client.upload_files([doc, archive])
        assert result.success is False
        assert result.message == "Unsupported file type"
        assert "bundle.zip" in result.error
        assert [f.file_name for f in result.files] == ["bundle.zip"]
        assert result.failed_uploads == 2
        assert client.requests == []

    @pytest.mark.asyncio
    async def test_upload_sends_detected_mime_type(self, make_client, tmp_path):
        doc = tmp_path / "notes.md"
        doc.write_text("# notes", encoding="utf-8")
        client = make_client(_json_handler({"results": [{"asset_id": "as-md", "file_name": "notes.md"}]}))
        result = await client.upload_files([doc])
        assert result.asset_ids == ["as-md"]
        assert b"text/markdown" in client.requests[0].content

    @pytest.mark.asyncio
    async def test_raise_for_error(self, make_client):
        from config.exceptions import UploadError
        client = make_client(_json_handler({}))
        result = await client.upload_files([])
        with pytest.raises(UploadError):
            result.raise_for_error()


class TestUsageSummary:
    def test_counts_calls(self, make_client):
        client = make_client(_json_handler({}))
        client.total_calls = 5
        assert client.get_usage_summary() == {"total_calls": 5}


class TestPingAgent:
    @pytest.mark.asyncio
    async def test_reachable(self, make_client):
        client = make_client(_json_handler({"status": "success", "result": {}, "message": "pong"}))
        assert await client.ping_agent("agent-1") is True
        assert json.loads(client.requests[0].content)["agent_id"] == "agent-1"

    @pytest.mark.asyncio
    async def test_unreachable(self, make_client):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client = make_client(handler)
        assert await client.ping_agent() is False


class TestGetResponseSchema:
    @pytest.mark.asyncio
    async def test_fields_detected(self, make_client, canonical_response):
        client = make_client(_json_handler(canonical_response))
        schema = await client.get_response_schema()
        assert schema.success is True
        names = [f.name for f in schema.fields]
        assert names == ["status", "result", "message", "metadata"]
        result_field = schema.fields[1]
        assert result_field.type == "object"
        checks = next(f for f in result_field.children if f.name == "checks")
        assert checks.is_array is True
        assert checks.children[0].path == "result.checks[0].name"
        assert json.loads(client.requests[0].content)["message"] == "Provide a sample response"

    @pytest.mark.asyncio
    async def test_failed_call(self, make_client):
        client = make_client(_json_handler({"error": "agent not found"}, status_code=404))
        schema = await client.get_response_schema("missing-agent")
        assert schema.success is False
        assert schema.fields == []
        assert schema.error == "agent not found"
