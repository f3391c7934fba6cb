"""Turn the untyped RPC params map into typed, validated values.

Optional parameters are permissive: a missing value or one of the wrong
JSON type is treated as absent and replaced by its default. Structurally
required values (``owner/repo``) fail hard instead.
"""

from typing import Any, Dict, List, Mapping, NamedTuple

from ghrpc.errors import InvalidRepoFormat, MissingParameter
from ghrpc.service.base import ParamInfo, ParamType


class RepoRef(NamedTuple):
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


def get_str(params: Mapping[str, Any], key: str) -> str | None:
    value = params.get(key)
    return value if isinstance(value, str) else None


def get_int(params: Mapping[str, Any], key: str, default: int | None) -> int | None:
    """Integer param, or default when absent or not an integer.

    Booleans are not integers here even though Python treats them as such.
    """
    value = params.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value


def parse_repo(value: str) -> RepoRef:
    """Split ``owner/repo``; anything but two non-empty parts is rejected."""
    parts = value.split("/")
    if len(parts) != 2 or not all(parts):
        raise InvalidRepoFormat(value)
    return RepoRef(parts[0], parts[1])


def extract_params(specs: List[ParamInfo], params: Mapping[str, Any] | None) -> Dict[str, Any]:
    """Extract every declared parameter of a method.

    Args:
        specs: Catalog entries of the method
        params: Raw params from the RPC request (may be None)

    Returns:
        Mapping of parameter name to typed value, ready to pass as kwargs

    Raises:
        MissingParameter: A required parameter is absent or unusable
        InvalidRepoFormat: A repo parameter is not owner/repo
    """
    raw: Mapping[str, Any] = params if isinstance(params, Mapping) else {}
    values: Dict[str, Any] = {}
    for spec in specs:
        if spec.param_type is ParamType.INTEGER:
            value: Any = get_int(raw, spec.name, None)
            if value is not None and spec.minimum is not None and value < spec.minimum:
                value = None
        else:
            value = get_str(raw, spec.name)

        if value is None:
            if spec.required:
                raise MissingParameter(spec.name)
            value = spec.default

        if spec.param_type is ParamType.REPO and value is not None:
            value = parse_repo(value)
        values[spec.name] = value
    return values
