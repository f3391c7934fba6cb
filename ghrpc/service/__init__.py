"""RPC service layer."""

from ghrpc.service.base import HealthStatus, MethodInfo, ParamInfo, ParamType, RpcService
from ghrpc.service.github import CATALOG, GitHubService
from ghrpc.service.protocol import handle_request

__all__ = [
    "CATALOG",
    "GitHubService",
    "HealthStatus",
    "MethodInfo",
    "ParamInfo",
    "ParamType",
    "RpcService",
    "handle_request",
]
