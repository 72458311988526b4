"""
AI Response Normalizer
Turns free-form replies from the generative model into typed results.

The model is asked for JSON but often wraps it in prose or a Markdown fence,
or returns nothing usable at all. ``normalize`` extracts the JSON object,
checks it against an explicit field descriptor and, when anything goes
wrong, substitutes a canned row from a static fallback table. It never
raises.
"""
from __future__ import annotations

import json
import re
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field


class MalformedResponse(Exception):
    """The model replied, but the text could not be turned into the expected shape."""


class FieldKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    LIST = "list"
    MAPPING = "mapping"


class FieldSpec(BaseModel):
    """One field of an expected response shape."""
    name: str
    kind: FieldKind
    required: bool = True
    choices: Optional[List[str]] = Field(None, description="Allowed values for string fields")
    item_shape: Optional["ResponseShape"] = Field(None, description="Shape every element of a list must match")

    class Config:
        frozen = True


class ResponseShape(BaseModel):
    """Tagged-field descriptor the parsed JSON object is checked against."""
    fields: List[FieldSpec]

    class Config:
        frozen = True

    @classmethod
    def of(cls, *fields: FieldSpec) -> "ResponseShape":
        return cls(fields=list(fields))


FieldSpec.model_rebuild()
ResponseShape.model_rebuild()


class StructuredResult(BaseModel):
    kind: Literal["structured"] = "structured"
    data: Dict[str, Any]
    from_fallback: bool = False


class PlainTextResult(BaseModel):
    kind: Literal["plain_text"] = "plain_text"
    text: str
    from_fallback: bool = False


GenerationResult = Union[StructuredResult, PlainTextResult]


class FallbackTable:
    """Static category key -> canned result mapping with a default row.

    Rows are frozen at construction and every lookup hands back a deep copy,
    so callers can edit what they receive without touching the table.
    """

    def __init__(self, rows: Mapping[str, GenerationResult], default_key: str):
        if default_key not in rows:
            raise ValueError(f"Default fallback key '{default_key}' is not a table row")
        self._rows = MappingProxyType({
            key: row.model_copy(update={"from_fallback": True}, deep=True)
            for key, row in rows.items()
        })
        self.default_key = default_key

    def __contains__(self, key: object) -> bool:
        return key in self._rows

    def lookup(self, key: Optional[str]) -> GenerationResult:
        row = self._rows.get(key) if key is not None else None
        if row is None:
            row = self._rows[self.default_key]
        return row.model_copy(deep=True)


# ```json ... ``` with the closing fence optional whitespace either side
_FENCED_JSON = re.compile(r"```json\s*\n?(.*?)\n?\s*```", re.DOTALL | re.IGNORECASE)


def extract_json_object(raw_text: str) -> Dict[str, Any]:
    """
    Pull the first JSON object out of a model reply.

    A fenced ```json block wins over a bare brace span. The bare span runs
    from the first ``{`` to the last ``}``, so example JSON in surrounding
    prose can still be picked up by mistake.

    Raises:
        MalformedResponse: no candidate span, invalid JSON, or not an object
    """
    if not raw_text or not raw_text.strip():
        raise MalformedResponse("Empty response")

    match = _FENCED_JSON.search(raw_text)
    if match:
        candidate = match.group(1)
    else:
        start = raw_text.find("{")
        end = raw_text.rfind("}")
        if start == -1 or end <= start:
            raise MalformedResponse("No JSON object found in response")
        candidate = raw_text[start:end + 1]

    try:
        parsed = json.loads(candidate)
    except (ValueError, RecursionError) as e:
        raise MalformedResponse(f"Invalid JSON in response: {e}") from e

    if not isinstance(parsed, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _matches_kind(value: Any, kind: FieldKind) -> bool:
    if kind is FieldKind.STRING:
        return isinstance(value, str)
    if kind is FieldKind.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if kind is FieldKind.LIST:
        return isinstance(value, list)
    return isinstance(value, dict)


def conform(data: Mapping[str, Any], shape: ResponseShape, path: str = "") -> Dict[str, Any]:
    """
    Check ``data`` against ``shape`` and return only the fields it names.

    Optional fields may be missing or null; they are left out of the result.

    Raises:
        MalformedResponse: a required field is missing or any field has the wrong kind
    """
    result: Dict[str, Any] = {}
    for spec in shape.fields:
        where = f"{path}{spec.name}"
        value = data.get(spec.name)
        if value is None:
            if spec.required:
                raise MalformedResponse(f"Missing required field '{where}'")
            continue
        if not _matches_kind(value, spec.kind):
            raise MalformedResponse(f"Field '{where}' should be a {spec.kind.value}")
        if spec.choices is not None and value not in spec.choices:
            raise MalformedResponse(f"Field '{where}' has unexpected value {value!r}")
        if spec.item_shape is not None:
            items = []
            for index, item in enumerate(value):
                if not isinstance(item, dict):
                    raise MalformedResponse(f"Item {where}[{index}] should be a mapping")
                items.append(conform(item, spec.item_shape, f"{where}[{index}]."))
            value = items
        result[spec.name] = value
    return result


def normalize(
    raw_text: Optional[str],
    expected_shape: Optional[ResponseShape],
    fallback_key: Optional[str],
    fallback_table: FallbackTable,
) -> GenerationResult:
    """
    Convert a raw model reply into a GenerationResult.

    Args:
        raw_text: Reply text, possibly empty or wrapped in prose/Markdown
        expected_shape: Required/optional fields of the JSON object, or None for plain text
        fallback_key: Row of ``fallback_table`` to use when the reply is unusable
        fallback_table: Canned results for this kind of generation

    Returns:
        StructuredResult holding exactly the shape's fields, PlainTextResult,
        or the fallback row (default row when the key is unknown)
    """
    if expected_shape is None:
        text = (raw_text or "").strip()
        if text:
            return PlainTextResult(text=text)
        print(f"MalformedResponse: empty text reply, using fallback '{fallback_key}'")
        return fallback_table.lookup(fallback_key)

    try:
        data = conform(extract_json_object(raw_text or ""), expected_shape)
    except MalformedResponse as e:
        print(f"MalformedResponse: {e}; using fallback '{fallback_key}'")
        return fallback_table.lookup(fallback_key)

    return StructuredResult(data=data)


__all__ = [
    "MalformedResponse",
    "FieldKind",
    "FieldSpec",
    "ResponseShape",
    "StructuredResult",
    "PlainTextResult",
    "GenerationResult",
    "FallbackTable",
    "extract_json_object",
    "conform",
    "normalize",
]
