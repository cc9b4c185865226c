from __future__ import annotations

import inspect
import logging
import types
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Union, get_args, get_origin

JsonSchema = Dict[str, Any]

logger = logging.getLogger(__name__)

_JSON_TYPES = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    dict: "object",
    list: "array",
}


def _json_type(annotation: Any) -> str:
    if isinstance(annotation, str):
        # Postponed annotations ("Optional[str]") arrive as text.
        for name, json_name in (("bool", "boolean"), ("int", "integer"), ("Dict", "object"), ("List", "array")):
            if name in annotation:
                return json_name
        return "string"
    origin = get_origin(annotation)
    if origin is None:
        return _JSON_TYPES.get(annotation, "string")
    if origin in (list, List):
        return "array"
    if origin in (dict, Dict):
        return "object"
    if origin in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        return _json_type(args[0]) if args else "string"
    return "string"


@dataclass(frozen=True)
class ApiFunction:
    name: str
    func: Callable[..., Any]
    description: str
    category: str
    tags: tuple[str, ...]
    signature: inspect.Signature
    mutates: bool = False

    @property
    def parameters(self) -> Dict[str, str]:
        return {param.name: str(param.annotation) for param in self.signature.parameters.values()}

    @property
    def parameter_schema(self) -> JsonSchema:
        schema: JsonSchema = {"type": "object", "properties": {}, "required": []}
        for param in self.signature.parameters.values():
            prop: JsonSchema = {"type": _json_type(param.annotation)}
            if param.default is inspect.Parameter.empty:
                schema["required"].append(param.name)
            elif isinstance(param.default, (str, int, float, bool)):
                prop["default"] = param.default
            schema["properties"][param.name] = prop
        if not schema["required"]:
            schema.pop("required")
        return schema

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "mutates": self.mutates,
            "parameters": self.parameter_schema,
        }


REGISTRY: Dict[str, ApiFunction] = {}


def register_api(
    name: str,
    *,
    description: str,
    category: str,
    tags: Optional[Iterable[str]] = None,
    mutates: bool = False,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if name in REGISTRY:
            raise ValueError(f"API function '{name}' is already registered.")
        REGISTRY[name] = ApiFunction(
            name=name,
            func=func,
            description=description,
            category=category,
            tags=tuple(tags or ()),
            signature=inspect.signature(func),
            mutates=mutates,
        )
        return func

    return decorator


def get_api_functions(category: Optional[str] = None) -> List[ApiFunction]:
    functions = sorted(REGISTRY.values(), key=lambda item: (item.category, item.name))
    if category is None:
        return functions
    return [function for function in functions if function.category == category]


def call_api(name: str, **kwargs: Any) -> Any:
    if name not in REGISTRY:
        raise KeyError(f"API function '{name}' is not registered.")
    logger.debug("Calling API function %s", name)
    return REGISTRY[name].func(**kwargs)
