"""Abstract base for services hosted by the RPC daemon framework."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ParamType(str, Enum):
    """How a parameter is extracted from the untyped params map."""

    STRING = "string"
    INTEGER = "integer"
    REPO = "repo"


class ParamInfo(BaseModel):
    """One parameter of an RPC method."""

    name: str
    param_type: ParamType
    required: bool = False
    default: Optional[Any] = None
    # Integers below this are treated as absent
    minimum: Optional[int] = None
    description: str = ""

    def published(self) -> Dict[str, Any]:
        """Machine-readable form for method_list (repo is a string on the wire)."""
        data: Dict[str, Any] = {
            "name": self.name,
            "type": "string" if self.param_type is ParamType.REPO else self.param_type.value,
            "required": self.required,
        }
        if self.default is not None:
            data["default"] = self.default
        if self.minimum is not None:
            data["minimum"] = self.minimum
        if self.param_type is ParamType.REPO:
            data["format"] = "owner/repo"
        if self.description:
            data["description"] = self.description
        return data


class MethodInfo(BaseModel):
    """Catalog entry: method name, description and parameters."""

    name: str
    description: str
    params: List[ParamInfo] = Field(default_factory=list)

    def published(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "params": [p.published() for p in self.params],
        }


class HealthStatus(BaseModel):
    """Health of one subsystem, reported to the serving framework."""

    ok: bool
    latency_ms: Optional[float] = None
    message: Optional[str] = None

    @classmethod
    def healthy_with_latency(cls, latency_ms: float) -> "HealthStatus":
        return cls(ok=True, latency_ms=latency_ms)

    @classmethod
    def unhealthy(cls, message: str) -> "HealthStatus":
        return cls(ok=False, message=message)


class RpcService(ABC):
    """Interface the daemon framework uses to host a service."""

    @abstractmethod
    def name(self) -> str:
        """Service name; also the method namespace (e.g. github.repos)."""
        ...

    @abstractmethod
    def version(self) -> str:
        ...

    @abstractmethod
    def dispatch(self, method: str, params: Dict[str, Any]) -> Any:
        """Run a method and return a JSON-serializable result.

        Raises:
            GitHubServiceError: Typed failure returned to the caller
        """
        ...

    @abstractmethod
    def method_list(self) -> List[MethodInfo]:
        ...

    def on_start(self) -> None:
        """Startup probe; raise to abort start. Override if needed."""
        return None

    def health_check(self) -> Dict[str, HealthStatus]:
        """Named subsystem health; must not raise. Override if needed."""
        return {}
