"""Build an operation table from a Google API discovery document."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from ytreporting.request import OperationSpec, Parameter
from ytreporting.types import MODEL_TYPES

COMMON_PARAMETERS = ("fields",)


def _schema_ref_name(node: Optional[Mapping[str, Any]]) -> Optional[str]:
    if not isinstance(node, Mapping):
        return None
    ref = node.get("$ref")
    return ref if isinstance(ref, str) and ref else None


def _walk_methods(resources: Mapping[str, Any]) -> Iterator[Mapping[str, Any]]:
    for resource in resources.values():
        if not isinstance(resource, Mapping):
            continue
        for method in (resource.get("methods") or {}).values():
            if isinstance(method, Mapping):
                yield method
        yield from _walk_methods(resource.get("resources") or {})


def _items_field(response_ref: Optional[str], schemas: Mapping[str, Any]) -> Optional[str]:
    if not response_ref:
        return None
    schema = schemas.get(response_ref)
    if not isinstance(schema, Mapping):
        return None
    props = schema.get("properties") or {}
    if "nextPageToken" not in props:
        return None
    arrays = [name for name, node in props.items() if isinstance(node, Mapping) and node.get("type") == "array"]
    return arrays[0] if len(arrays) == 1 else None


def _body_parameter_name(request_ref: str) -> str:
    return request_ref[:1].lower() + request_ref[1:]


def operation_from_method(
    method: Mapping[str, Any],
    schemas: Mapping[str, Any],
    common_parameters: Sequence[str] = (),
) -> OperationSpec:
    parameters: List[Parameter] = []
    for name, node in (method.get("parameters") or {}).items():
        if not isinstance(node, Mapping):
            node = {}
        kind = "path" if node.get("location", "query") == "path" else "query"
        parameters.append(Parameter(name, kind, required=bool(node.get("required")) or kind == "path"))

    request_ref = _schema_ref_name(method.get("request"))
    if request_ref:
        parameters.append(Parameter(_body_parameter_name(request_ref), "body", required=True))

    declared = {p.name for p in parameters}
    parameters.extend(Parameter(name) for name in common_parameters if name not in declared)

    response_ref = _schema_ref_name(method.get("response"))
    return OperationSpec(
        operation_id=str(method["id"]),
        http_method=str(method.get("httpMethod", "GET")).upper(),  # type: ignore[arg-type]
        path_template=str(method["path"]),
        parameters=tuple(parameters),
        response_type=MODEL_TYPES.get(response_ref, dict) if response_ref else dict,
        items_field=_items_field(response_ref, schemas),
    )


def load_operations(document: Mapping[str, Any]) -> Dict[str, OperationSpec]:
    schemas = document.get("schemas") or {}
    top_level = document.get("parameters") or {}
    common = [name for name in COMMON_PARAMETERS if name in top_level]
    operations: Dict[str, OperationSpec] = {}
    for method in _walk_methods(document.get("resources") or {}):
        spec = operation_from_method(method, schemas, common)
        operations[spec.operation_id] = spec
    return operations


def load_operations_file(path: str) -> Dict[str, OperationSpec]:
    return load_operations(json.loads(Path(path).read_text(encoding="utf-8")))
