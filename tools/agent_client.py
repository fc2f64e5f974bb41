"""HTTP facade for the hosted document verification agent.

Every public coroutine returns a guaranteed-shape value object. Transport
failures are caught here and turned into error responses; the parsing layer
below never raises.
"""

import logging
import uuid
from pathlib import Path
from typing import Callable, Iterable, Optional

import httpx

from config.exceptions import AgentError, InvalidConfigError
from config.settings import Settings, get_settings
from events.sse_parser import SSEFrameReassembler, utc_timestamp
from models.enums import EventType
from models.events import ParsedSSEEvent
from models.response import AgentResponse, NormalizedResponse, ResponseSchema, UploadedFile, UploadResponse
from tools.file_types import guess_mime_type, validate_upload_file
from tools.json_parser import robust_json_parse
from tools.response_normalizer import normalize_response
from tools.response_schema import detect_fields
from tools.text_utils import truncate

logger = logging.getLogger(__name__)


def _new_user_id() -> str:
    return f"user-{uuid.uuid4()}"


def _new_session_id(agent_id: str) -> str:
    return f"{agent_id}-{uuid.uuid4().hex[:12]}"


def _error_message_from_body(raw_text: str, status_code: int) -> str:
    """Pull ``error``/``message``/``detail`` out of an error body if it has one."""
    parsed = robust_json_parse(raw_text)
    if parsed.success and isinstance(parsed.data, dict):
        for key in ("error", "message", "detail"):
            value = parsed.data.get(key)
            if isinstance(value, str) and value:
                return value
    return f"API returned status {status_code}"


class AgentClient:
    """Async client for the agent inference, streaming and asset endpoints.

    Args:
        settings: Application settings. Defaults to the cached settings.
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self._transport = transport
        self.total_calls = 0

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.settings.request_timeout, transport=self._transport)

    def _headers(self) -> dict[str, str]:
        if not self.settings.lyzr_api_key:
            logger.warning("LYZR_API_KEY is not set; request will likely be rejected")
        return {
            "Content-Type": "application/json",
            "x-api-key": self.settings.lyzr_api_key,
        }

    def _resolve_agent_id(self, agent_id: Optional[str]) -> str:
        agent_id = agent_id or self.settings.default_agent_id
        if not agent_id:
            raise InvalidConfigError("No agent id given and DEFAULT_AGENT_ID is not set")
        return agent_id

    def _build_payload(
        self,
        message: str,
        agent_id: str,
        user_id: Optional[str],
        session_id: Optional[str],
        assets: Optional[list[str]],
    ) -> dict:
        payload = {
            "message": message,
            "agent_id": agent_id,
            "user_id": user_id or _new_user_id(),
            "session_id": session_id or _new_session_id(agent_id),
        }
        if assets:
            payload["assets"] = list(assets)
        return payload

    async def call_agent(
        self,
        message: str,
        agent_id: Optional[str] = None,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
        assets: Optional[list[str]] = None,
    ) -> AgentResponse:
        """Send a message (plus optional asset ids) and normalize the reply.

        Returns:
            AgentResponse whose ``response`` always has status and result.

        Raises:
            InvalidConfigError: If no agent id is available.
        """
        agent_id = self._resolve_agent_id(agent_id)
        payload = self._build_payload(message, agent_id, user_id, session_id, assets)
        self.total_calls += 1

        logger.debug(
            "Agent call: agent=%s, session=%s, assets=%d",
            agent_id, payload["session_id"], len(payload.get("assets", [])),
        )

        try:
            async with self._http() as client:
                http_response = await client.post(
                    self.settings.agent_api_url, json=payload, headers=self._headers(),
                )
        except httpx.HTTPError as e:
            error = str(e) or e.__class__.__name__
            logger.error("Agent call failed: %s", error)
            return AgentResponse(
                success=False,
                response=NormalizedResponse.error(error),
                agent_id=agent_id,
                user_id=payload["user_id"],
                session_id=payload["session_id"],
                error=error,
                details=repr(e),
            )

        raw_text = http_response.text
        logger.debug("Agent response: status=%d, %d chars", http_response.status_code, len(raw_text))

        if not http_response.is_success:
            error = _error_message_from_body(raw_text, http_response.status_code)
            logger.warning("Agent API error %d: %s", http_response.status_code, error)
            return AgentResponse(
                success=False,
                response=NormalizedResponse.error(error),
                agent_id=agent_id,
                user_id=payload["user_id"],
                session_id=payload["session_id"],
                error=error,
                raw_response=raw_text,
            )

        parsed = robust_json_parse(raw_text)
        if not parsed.success:
            logger.warning("Agent reply could not be parsed: %s", truncate(raw_text, 120))
            return AgentResponse(
                success=False,
                response=NormalizedResponse.error(parsed.error),
                agent_id=agent_id,
                user_id=payload["user_id"],
                session_id=payload["session_id"],
                error=parsed.error,
                raw_response=raw_text,
                parse_strategy=parsed.strategy.value,
            )

        return AgentResponse(
            success=True,
            response=normalize_response(parsed.data),
            agent_id=agent_id,
            user_id=payload["user_id"],
            session_id=payload["session_id"],
            timestamp=utc_timestamp(),
            raw_response=raw_text,
            parse_strategy=parsed.strategy.value,
        )

    async def call_agent_json(
        self,
        message: str,
        agent_id: Optional[str] = None,
        session_id: Optional[str] = None,
        assets: Optional[list[str]] = None,
    ) -> dict:
        """Call the agent and return ``response.result``.

        Raises:
            AgentError: If the call failed or the agent reported an error.
        """
        result = await self.call_agent(message, agent_id, session_id=session_id, assets=assets)
        if not result.success:
            raise AgentError(result.error or "Agent call failed", {"agent_id": result.agent_id})
        if result.response.is_error:
            raise AgentError(result.response.message or "Agent reported an error", {"agent_id": result.agent_id})
        return result.response.result

    async def stream_agent(
        self,
        message: str,
        agent_id: Optional[str] = None,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
        assets: Optional[list[str]] = None,
        on_event: Optional[Callable[[ParsedSSEEvent], None]] = None,
    ) -> list[ParsedSSEEvent]:
        """Stream a reply as SSE and parse each frame as it completes.

        Args:
            on_event: Optional callback fired once per event, in arrival order.

        Returns:
            All parsed events. A transport or HTTP failure ends the list with
            a synthetic ``chat_failed`` event.
        """
        agent_id = self._resolve_agent_id(agent_id)
        payload = self._build_payload(message, agent_id, user_id, session_id, assets)
        request_id = uuid.uuid4().hex
        reassembler = SSEFrameReassembler(request_id)
        events: list[ParsedSSEEvent] = []
        self.total_calls += 1

        def _emit(parsed: Optional[ParsedSSEEvent]) -> None:
            if parsed is None:
                return
            events.append(parsed)
            if on_event:
                on_event(parsed)

        def _failed(error: str) -> ParsedSSEEvent:
            return ParsedSSEEvent(
                success=True,
                event_type=EventType.CHAT_FAILED.value,
                event={
                    "type": EventType.CHAT_FAILED.value,
                    "request_id": request_id,
                    "timestamp": utc_timestamp(),
                    "error": error,
                },
            )

        logger.debug("Agent stream: agent=%s, request=%s", agent_id, request_id)

        try:
            async with self._http() as client:
                async with client.stream(
                    "POST", self.settings.agent_stream_url, json=payload, headers=self._headers(),
                ) as http_response:
                    if not http_response.is_success:
                        body = (await http_response.aread()).decode("utf-8", errors="replace")
                        error = _error_message_from_body(body, http_response.status_code)
                        logger.warning("Agent stream error %d: %s", http_response.status_code, error)
                        _emit(_failed(error))
                        return events
                    async for line in http_response.aiter_lines():
                        _emit(reassembler.feed_line(line))
        except httpx.HTTPError as e:
            error = str(e) or e.__class__.__name__
            logger.error("Agent stream failed: %s", error)
            _emit(reassembler.flush())
            _emit(_failed(error))
            return events

        _emit(reassembler.flush())
        logger.debug("Agent stream finished: %d events", len(events))
        return events

    async def upload_files(self, paths: Iterable[str | Path]) -> UploadResponse:
        """Upload documents to asset storage and collect their asset ids."""
        paths = [Path(p) for p in paths]
        total = len(paths)

        def _failure(message: str, error: str) -> UploadResponse:
            return UploadResponse(
                success=False,
                total_files=total,
                failed_uploads=total,
                message=message,
                timestamp=utc_timestamp(),
                error=error,
            )

        if not paths:
            return _failure("No files provided", "No files provided")
        if not self.settings.lyzr_api_key:
            return _failure("LYZR_API_KEY not configured", "LYZR_API_KEY not configured in environment")

        rejected = []
        for p in paths:
            error = validate_upload_file(p)
            if error:
                rejected.append(UploadedFile(asset_id="", file_name=p.name, success=False, error=error))
        if rejected:
            logger.warning("Rejected %d unsupported file(s): %s", len(rejected), ", ".join(f.file_name for f in rejected))
            failure = _failure("Unsupported file type", "; ".join(f"{f.file_name}: {f.error}" for f in rejected))
            failure.files = rejected
            return failure

        try:
            files = [
                ("files", (p.name, p.read_bytes(), guess_mime_type(p)))
                for p in paths
            ]
        except OSError as e:
            logger.error("Cannot read upload file: %s", e)
            return _failure("Could not read file", str(e))

        self.total_calls += 1
        logger.debug("Uploading %d file(s)", total)

        try:
            async with self._http() as client:
                http_response = await client.post(
                    self.settings.upload_url,
                    files=files,
                    headers={"x-api-key": self.settings.lyzr_api_key},
                )
        except httpx.HTTPError as e:
            logger.error("File upload failed: %s", e)
            return _failure("Network error during upload", str(e) or e.__class__.__name__)

        if not http_response.is_success:
            logger.error("Upload API error %d: %s", http_response.status_code, truncate(http_response.text))
            return _failure(f"Upload failed with status {http_response.status_code}", http_response.text)

        parsed = robust_json_parse(http_response.text)
        data = parsed.data if parsed.success and isinstance(parsed.data, dict) else {}
        uploaded = [
            UploadedFile(
                asset_id=r.get("asset_id") or "",
                file_name=r.get("file_name") or "",
                success=r.get("success", True),
                error=r.get("error"),
            )
            for r in data.get("results") or []
            if isinstance(r, dict)
        ]
        asset_ids = [f.asset_id for f in uploaded if f.success and f.asset_id]

        return UploadResponse(
            success=True,
            asset_ids=asset_ids,
            files=uploaded,
            total_files=data.get("total_files") or total,
            successful_uploads=data.get("successful_uploads") or len(asset_ids),
            failed_uploads=data.get("failed_uploads") or 0,
            message=f"Successfully uploaded {len(asset_ids)} file(s)",
            timestamp=utc_timestamp(),
        )

    async def ping_agent(self, agent_id: Optional[str] = None) -> bool:
        """Return True if the agent answers a short message with a parseable reply."""
        result = await self.call_agent("ping", agent_id)
        if not result.success:
            logger.info("Agent %s did not answer ping: %s", result.agent_id, result.error)
        return result.success

    async def get_response_schema(
        self,
        agent_id: Optional[str] = None,
        test_message: str = "Provide a sample response",
    ) -> ResponseSchema:
        """Send a sample message and describe the fields of the normalized reply."""
        result = await self.call_agent(test_message, agent_id)
        if not result.success:
            return ResponseSchema(success=False, raw_response=result.raw_response, error=result.error)
        return ResponseSchema(
            success=True,
            fields=detect_fields(result.response.to_dict()),
            raw_response=result.raw_response,
        )

    def get_usage_summary(self) -> dict:
        """Return call count statistics."""
        return {"total_calls": self.total_calls}
