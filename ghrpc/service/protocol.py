"""Request/response envelopes exchanged with the daemon framework.

The framework decodes one request per line (``{"id", "v", "method",
"params"}``) and hands it to handle_request; every outcome, including
typed failures, comes back as a response envelope.
"""

import logging
import time
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from ghrpc.errors import GitHubServiceError
from ghrpc.service.base import RpcService

LOG = logging.getLogger("ghrpc.service.protocol")

PROTOCOL_VERSION = 1


class RpcRequest(BaseModel):
    id: Optional[str | int] = None
    v: int = PROTOCOL_VERSION
    method: str
    params: Dict[str, Any] = Field(default_factory=dict)


class RpcErrorBody(BaseModel):
    code: str
    message: str


class RpcResponse(BaseModel):
    id: Optional[str | int] = None
    ok: bool
    result: Any = None
    error: Optional[RpcErrorBody] = None
    meta: Dict[str, Any] = Field(default_factory=dict)


def handle_request(service: RpcService, raw: Dict[str, Any]) -> Dict[str, Any]:
    """Run one decoded request against a service and build the response.

    Typed service errors become ``ok: false`` envelopes carrying their code.
    Any other exception is logged with traceback and reported as
    ``internal_error``; neither takes the service down.
    """
    start = time.perf_counter()
    request_id = raw.get("id") if isinstance(raw, dict) else None
    try:
        request = RpcRequest.model_validate(raw)
    except ValidationError as e:
        return _error(request_id, "invalid_request", f"Malformed request: {e.errors()[0]['msg']}", start)

    try:
        result = service.dispatch(request.method, request.params)
    except GitHubServiceError as e:
        LOG.info("%s failed: %s", request.method, e)
        return _error(request.id, e.code, str(e), start)
    except Exception as e:
        LOG.exception("Unexpected error in %s: %s", request.method, e)
        return _error(request.id, "internal_error", str(e), start)

    return _dump(RpcResponse(id=request.id, ok=True, result=result, meta=_meta(start)))


def _dump(response: RpcResponse) -> Dict[str, Any]:
    """Serialize, dropping unset top-level members (result or error)."""
    data = response.model_dump(mode="json")
    return {k: v for k, v in data.items() if v is not None or k == "id"}


def _meta(start: float) -> Dict[str, Any]:
    return {"server_ms": round((time.perf_counter() - start) * 1000.0, 3), "v": PROTOCOL_VERSION}


def _error(request_id: Any, code: str, message: str, start: float) -> Dict[str, Any]:
    response = RpcResponse(
        id=request_id if isinstance(request_id, (str, int)) else None,
        ok=False,
        error=RpcErrorBody(code=code, message=message),
        meta=_meta(start),
    )
    return _dump(response)
