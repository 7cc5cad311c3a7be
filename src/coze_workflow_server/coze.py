"""Client for the Coze workflow API.

Sends a single ``POST /v1/workflow/run`` request per invocation and reports
what happened as a :class:`WorkflowOutcome` instead of raising, so callers
decide how each failure is surfaced.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx


COZE_WORKFLOW_URL = "https://api.coze.com/v1/workflow/run"

SUCCESS = "success"
API_ERROR = "api_error"
TRANSPORT_ERROR = "transport_error"


@dataclass
class WorkflowInvocation:
    workflow_id: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    bot_id: Optional[str] = None
    app_id: Optional[str] = None

    def to_payload(self) -> dict:
        """Build the JSON request body, leaving out empty optional ids."""
        payload = {
            "workflow_id": self.workflow_id,
            "parameters": self.parameters or {},
        }
        if self.bot_id:
            payload["bot_id"] = self.bot_id
        if self.app_id:
            payload["app_id"] = self.app_id
        return payload


@dataclass
class WorkflowOutcome:
    """Result of one workflow run.

    ``kind`` is one of ``SUCCESS``, ``API_ERROR`` (Coze answered with an
    error status) or ``TRANSPORT_ERROR`` (no HTTP response at all).
    """

    kind: str
    data: Any = None
    message: str = ""
    debug_url: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.kind == SUCCESS

    def render(self) -> str:
        """Format a successful outcome as tool output text."""
        if isinstance(self.data, str):
            body = self.data
        else:
            body = json.dumps(self.data, indent=2, ensure_ascii=False)
        return (
            f"Workflow execution result:\n{body}\n\n"
            f"Debug URL: {self.debug_url or 'Not available'}"
        )

    def error_message(self) -> str:
        """Format a failed outcome as a protocol error message."""
        message = f"Coze API error: {self.message}"
        if self.debug_url:
            message += f"\nDebug URL: {self.debug_url}"
        return message


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _field(body: Any, key: str) -> Optional[str]:
    if isinstance(body, dict):
        value = body.get(key)
        if value:
            return str(value)
    return None


class CozeWorkflowClient:
    def __init__(
        self,
        api_token: str,
        url: str = COZE_WORKFLOW_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.api_token = api_token
        self.url = url
        self.transport = transport
        # None disables the httpx default of 5 seconds.
        self.timeout = timeout

    @property
    def headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

    async def run(self, invocation: WorkflowInvocation) -> WorkflowOutcome:
        """Run a workflow once.

        Args:
            invocation: Workflow id, parameters and optional bot/app ids

        Returns:
            WorkflowOutcome describing success, an API error or a transport error.
            Exceptions that are not ``httpx.HTTPError`` propagate unchanged.
        """
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                response = await client.post(
                    self.url,
                    json=invocation.to_payload(),
                    headers=self.headers,
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                body = _json_body(e.response)
                return WorkflowOutcome(
                    kind=API_ERROR,
                    data=body,
                    message=_field(body, "msg") or str(e),
                    debug_url=_field(body, "debug_url"),
                    status_code=e.response.status_code,
                )
            except httpx.HTTPError as e:
                return WorkflowOutcome(
                    kind=TRANSPORT_ERROR,
                    message=str(e) or type(e).__name__,
                )

        body = _json_body(response)
        if body is None:
            return WorkflowOutcome(
                kind=SUCCESS,
                data=response.text,
                status_code=response.status_code,
            )
        return WorkflowOutcome(
            kind=SUCCESS,
            data=body,
            debug_url=_field(body, "debug_url"),
            status_code=response.status_code,
        )
