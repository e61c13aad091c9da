"""HTTP client for the coaching backend, as used by the mobile app."""

import logging
from typing import Any, Optional

import httpx

from .consumer import DeltaHandler, StreamResult, consume_event_stream
from .errors import APIError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

CONNECTION_HELP = (
    "Cannot connect to server. Please ensure:\n"
    "1. Backend server is running\n"
    "2. API URL is correct\n"
    "3. You are on the same network"
)


class CoachAPIClient:
    """Async client for the relay's buffered and streaming endpoints.

    Buffered calls raise ``APIError``. Streaming calls never raise for
    transport or server failures; they return a ``StreamResult`` whose
    ``error`` is set instead.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def set_base_url(self, url: str) -> None:
        """Point the client at a different backend (e.g. a LAN address)."""
        self.base_url = url.rstrip("/")

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(transport=self._transport)
        return self._client

    async def request(self, method: str, endpoint: str, json: Any = None) -> dict:
        client = await self._get_client()
        try:
            response = await client.request(
                method,
                f"{self.base_url}{endpoint}",
                json=json,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise APIError("Request timed out. Please check your connection.") from e
        except httpx.TransportError as e:
            raise APIError(CONNECTION_HELP) from e

        if response.is_error:
            raise APIError(_error_message(response), status_code=response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON from server: {e}", status_code=response.status_code) from e

    async def get(self, endpoint: str) -> dict:
        return await self.request("GET", endpoint)

    async def post(self, endpoint: str, data: Any) -> dict:
        return await self.request("POST", endpoint, json=data)

    async def health_check(self) -> bool:
        try:
            response = await self.get("/health")
        except APIError as e:
            logger.error("Health check failed: %s", e)
            return False
        return response.get("status") == "ok"

    async def test_connection(self) -> dict:
        """Summarize backend reachability for a settings screen."""
        try:
            data = await self.get("/health")
        except APIError as e:
            return {"success": False, "message": str(e)}
        return {
            "success": True,
            "status": data.get("status"),
            "ollama": data.get("ollama"),
            "message": "Connected successfully!",
        }

    async def stream(
        self,
        endpoint: str,
        data: Any,
        on_delta: Optional[DeltaHandler] = None,
    ) -> StreamResult:
        """POST ``data`` and consume the event-stream response incrementally."""
        client = await self._get_client()
        timeout = httpx.Timeout(self.timeout, read=None)
        try:
            async with client.stream("POST", f"{self.base_url}{endpoint}", json=data, timeout=timeout) as response:
                if response.is_error:
                    await response.aread()
                    return StreamResult(error=_error_message(response))
                return await consume_event_stream(response.aiter_bytes(), on_delta)
        except httpx.HTTPError as e:
            logger.error("Streaming request to %s failed: %s", endpoint, e)
            return StreamResult(error=f"{type(e).__name__}: {e}" if str(e) else type(e).__name__)

    async def stream_workout(
        self,
        user_id: Optional[str],
        form: dict[str, Any],
        on_delta: Optional[DeltaHandler] = None,
    ) -> StreamResult:
        """Stream a workout plan; ``result.payload["workoutId"]`` is set on success."""
        return await self.stream("/api/workout/generate-stream", {"userId": user_id, **form}, on_delta)

    async def stream_chat(
        self,
        user_id: Optional[str],
        message: str,
        conversation_id: Optional[str] = None,
        on_delta: Optional[DeltaHandler] = None,
    ) -> StreamResult:
        payload = {"userId": user_id, "message": message, "conversationId": conversation_id}
        return await self.stream("/api/chat/stream", payload, on_delta)

    async def generate_workout(self, user_id: Optional[str], form: dict[str, Any]) -> dict:
        return await self.post("/api/workout/generate", {"userId": user_id, **form})

    async def chat(self, user_id: Optional[str], message: str, conversation_id: Optional[str] = None) -> dict:
        return await self.post(
            "/api/chat",
            {"userId": user_id, "message": message, "conversationId": conversation_id},
        )

    async def get_conversation(self, conversation_id: str) -> dict:
        return await self.get(f"/api/chat/{conversation_id}")

    async def list_workouts(self, user_id: str) -> list[dict]:
        return (await self.get(f"/api/workouts/{user_id}")).get("workouts", [])

    async def get_workout(self, workout_id: str) -> dict:
        return (await self.get(f"/api/workout/{workout_id}"))["workout"]

    async def exercise_form(self, exercise_name: str) -> str:
        return (await self.post("/api/exercise/form", {"exerciseName": exercise_name}))["guidance"]

    async def analyze_progress(self, user_id: Optional[str], workout_history: Any, current_stats: Any) -> str:
        data = await self.post(
            "/api/progress/analyze",
            {"userId": user_id, "workoutHistory": workout_history, "currentStats": current_stats},
        )
        return data["analysis"]

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = {}
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return f"HTTP {response.status_code}: {response.reason_phrase}"
