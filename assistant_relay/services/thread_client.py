"""Client for the remote thread-based assistant service (OpenAI Assistants v2)."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from ..errors import RemoteDependencyError
from ..utils.logger import get_app_logger


DEFAULT_API_BASE = "https://api.openai.com/v1"
DEFAULT_BETA = "assistants=v2"


class RunStatus(str, Enum):
    """Run statuses reported by the remote service."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    INCOMPLETE = "incomplete"


@dataclass
class Run:
    """A remote run of an assistant against a thread."""

    id: str
    thread_id: str
    status: str
    attempts: int = 0
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], thread_id: str) -> "Run":
        return cls(
            id=payload["id"],
            thread_id=payload.get("thread_id") or thread_id,
            status=payload.get("status", ""),
            payload=payload
        )


def _error_detail(response: httpx.Response) -> Optional[str]:
    """Pull the remote error message out of a failed response, if any."""
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return error.get("message")
        if isinstance(error, str):
            return error
    return None


class ThreadClient:
    """
    Thin async adapter over the remote assistant API.

    Every non-success response or transport failure is raised as a
    RemoteDependencyError tagged with the operation name. Nothing is retried
    here; the only retrying in the system is the run status poll.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_API_BASE,
        beta: str = DEFAULT_BETA,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the client.

        Args:
            api_key: Remote service API key (None leaves the client unconfigured)
            base_url: API base URL
            beta: Value of the OpenAI-Beta header
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_key = api_key
        self.logger = get_app_logger()

        headers = {
            "Content-Type": "application/json",
            "OpenAI-Beta": beta,
        }
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            self.logger.error(f"[ThreadClient] {operation} transport error: {e}")
            raise RemoteDependencyError(operation, detail=str(e)) from e

        if not response.is_success:
            detail = _error_detail(response)
            self.logger.error(f"[ThreadClient] {operation} failed: {response.status_code} {detail or ''}")
            raise RemoteDependencyError(operation, response.status_code, detail)

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteDependencyError(operation, response.status_code, "Response was not valid JSON") from e

        if not isinstance(data, dict):
            raise RemoteDependencyError(operation, response.status_code, "Unexpected response shape")
        return data

    async def create_thread(self) -> str:
        """
        Create a new remote thread.

        Returns:
            The remote thread ID
        """
        data = await self._request("create_thread", "POST", "/threads")
        thread_id = data.get("id")
        if not thread_id:
            raise RemoteDependencyError("create_thread", detail="Response had no thread id")
        self.logger.info(f"[ThreadClient] Created thread {thread_id}")
        return thread_id

    async def add_message(self, thread_id: str, role: str, content: str) -> Dict[str, Any]:
        """
        Append a message to a remote thread.

        Args:
            thread_id: Remote thread ID
            role: Message role
            content: Message text

        Returns:
            The created remote message object
        """
        return await self._request(
            "add_message",
            "POST",
            f"/threads/{thread_id}/messages",
            json={"role": role, "content": content}
        )

    async def create_run(self, thread_id: str, assistant_id: str) -> Run:
        """
        Start a run of an assistant against a thread.

        Args:
            thread_id: Remote thread ID
            assistant_id: Remote assistant ID

        Returns:
            The created Run
        """
        data = await self._request(
            "create_run",
            "POST",
            f"/threads/{thread_id}/runs",
            json={"assistant_id": assistant_id}
        )
        if not data.get("id"):
            raise RemoteDependencyError("create_run", detail="Response had no run id")
        run = Run.from_payload(data, thread_id)
        self.logger.info(f"[ThreadClient] Created run {run.id} on thread {thread_id} (status={run.status})")
        return run

    async def get_run(self, thread_id: str, run_id: str) -> Run:
        """
        Fetch the current state of a run.

        Args:
            thread_id: Remote thread ID
            run_id: Remote run ID

        Returns:
            The Run as currently reported
        """
        data = await self._request("get_run", "GET", f"/threads/{thread_id}/runs/{run_id}")
        data.setdefault("id", run_id)
        return Run.from_payload(data, thread_id)

    async def list_messages(self, thread_id: str) -> List[Dict[str, Any]]:
        """
        List the messages on a thread, newest first.

        Args:
            thread_id: Remote thread ID

        Returns:
            List of remote message objects
        """
        data = await self._request(
            "list_messages",
            "GET",
            f"/threads/{thread_id}/messages",
            params={"order": "desc"}
        )
        return data.get("data") or []

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
