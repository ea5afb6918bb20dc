from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple
from urllib.parse import quote, urlencode

from pydantic import BaseModel

HttpMethod = Literal["GET", "POST", "DELETE"]
ParameterKind = Literal["path", "query", "body"]

_PLACEHOLDER = re.compile(r"\{(\+?)([^}]+)\}")
_PCT_TRIPLET = re.compile(r"%[0-9A-Fa-f]{2}")
_RESERVED_SAFE = "/:@!$&'()*+,;=?#[]"


class ValidationError(ValueError):
    def __init__(
        self,
        message: str,
        *,
        missing_param: Optional[str] = None,
        operation_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.missing_param = missing_param
        self.operation_id = operation_id


@dataclass(frozen=True)
class Parameter:
    name: str
    kind: ParameterKind = "query"
    required: bool = False


@dataclass(frozen=True)
class Request:
    operation_id: str
    http_method: HttpMethod
    path_template: str
    path: str
    query: Tuple[Tuple[str, Any], ...] = ()
    body: Optional[Mapping[str, Any]] = None
    response_type: Any = dict

    def __post_init__(self) -> None:
        if self.body is not None:
            object.__setattr__(self, "body", _freeze(self.body))

    def body_data(self) -> Optional[Dict[str, Any]]:
        """Plain, JSON-serializable copy of the body."""
        return _thaw(self.body) if self.body is not None else None

    def query_value(self, name: str) -> Any:
        for key, value in self.query:
            if key == name:
                return value
        return None

    def with_query(self, **updates: Any) -> Request:
        """Copy with query parameters replaced or appended; a ``None`` value drops the parameter."""
        pending = dict(updates)
        merged: List[Tuple[str, Any]] = []
        for key, value in self.query:
            if key in pending:
                value = pending.pop(key)
                if value is None:
                    continue
            merged.append((key, value))
        for key, value in pending.items():
            if value is not None:
                merged.append((key, value))
        return replace(self, query=tuple(merged))

    def url(self, base_url: str) -> str:
        url = f"{base_url.rstrip('/')}/{self.path.lstrip('/')}"
        if self.query:
            url = f"{url}?{urlencode([(key, _query_text(value)) for key, value in self.query])}"
        return url


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


def _query_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict)):
        return len(value) == 0
    return False


def template_placeholders(template: str) -> List[str]:
    return [name for _, name in _PLACEHOLDER.findall(template)]


def expand_path(template: str, values: Mapping[str, Any]) -> str:
    def _substitute(match: re.Match) -> str:
        reserved, name = match.group(1), match.group(2)
        text = str(values[name])
        if not reserved:
            return quote(text, safe="")
        # existing %XX triplets pass through unchanged
        parts: List[str] = []
        pos = 0
        for triplet in _PCT_TRIPLET.finditer(text):
            parts.append(quote(text[pos:triplet.start()], safe=_RESERVED_SAFE))
            parts.append(triplet.group(0))
            pos = triplet.end()
        parts.append(quote(text[pos:], safe=_RESERVED_SAFE))
        return "".join(parts)

    return _PLACEHOLDER.sub(_substitute, template)


def _body_value(value: Any) -> Mapping[str, Any]:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return value


@dataclass(frozen=True)
class OperationSpec:
    operation_id: str
    http_method: HttpMethod
    path_template: str
    parameters: Tuple[Parameter, ...]
    response_type: Any = dict
    items_field: Optional[str] = None
    fixed_query: Tuple[Tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        declared = {p.name for p in self.parameters if p.kind == "path"}
        placeholders = set(template_placeholders(self.path_template))
        if declared != placeholders:
            raise ValueError(
                f"{self.operation_id}: path parameters {sorted(declared)} do not match template {self.path_template!r}"
            )

    @property
    def paginated(self) -> bool:
        return self.items_field is not None

    def parameter(self, name: str) -> Optional[Parameter]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def build(self, values: Optional[Mapping[str, Any]] = None) -> Request:
        given = dict(values or {})
        for name in given:
            if self.parameter(name) is None:
                raise ValidationError(f"{self.operation_id}: unknown parameter '{name}'", operation_id=self.operation_id)
        for param in self.parameters:
            if (param.required or param.kind == "path") and _is_blank(given.get(param.name)):
                raise ValidationError(
                    f"{self.operation_id}: missing required parameter '{param.name}'",
                    missing_param=param.name,
                    operation_id=self.operation_id,
                )

        path = expand_path(self.path_template, {p.name: given[p.name] for p in self.parameters if p.kind == "path"})
        query = [
            (p.name, given[p.name])
            for p in self.parameters
            if p.kind == "query" and given.get(p.name) is not None
        ]
        query.extend(self.fixed_query)
        body: Optional[Mapping[str, Any]] = None
        for param in self.parameters:
            if param.kind == "body" and given.get(param.name) is not None:
                body = _body_value(given[param.name])

        return Request(
            operation_id=self.operation_id,
            http_method=self.http_method,
            path_template=self.path_template,
            path=path,
            query=tuple(query),
            body=body,
            response_type=self.response_type,
        )
