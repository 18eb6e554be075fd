"""Field extraction and type coercion.

Pulls raw text for a named field out of a labeler's response and coerces it
to the field's declared primitive type. Failures never raise: they are
reported on the returned `Extraction` so the field can be scored as failed
while its siblings are still graded.
"""

from __future__ import annotations

import enum
import json
import math
import re
import typing as t

from labelgrade.model import ExtractionFailure, FieldType, TypedValue

INT_PATTERN = re.compile(r"[+-]?\d+")
FLOAT_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

BOOLEAN_VALUES: dict[str, bool] = {
    "true": True,
    "false": False,
    "1": True,
    "0": False,
    "yes": True,
    "no": False,
}


class ContainerFormat(enum.Enum):
    XML = "xml"
    JSON = "json"
    Text = "text"


class Extraction(t.NamedTuple):
    raw: str | None
    value: TypedValue | None = None
    failure: ExtractionFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class MalformedContainer(object):
    """Marker for a response whose container could not be parsed."""

    _instance: t.ClassVar[MalformedContainer | None] = None

    def __new__(cls) -> MalformedContainer:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "<MalformedContainer>"


ParsedContainer = str | dict[str, t.Any] | MalformedContainer


def parse_container(response: str, container: ContainerFormat) -> ParsedContainer:
    """Parse the response once per grader.

    XML and plain text responses are searched as-is; JSON responses are
    decoded into an object, or `MalformedContainer()` if that is impossible.
    """
    if container is not ContainerFormat.JSON:
        return response

    try:
        parsed = json.loads(response)
    except (ValueError, RecursionError):
        # ValueError also covers integers past the interpreter's digit limit
        return MalformedContainer()
    if not isinstance(parsed, dict):
        return MalformedContainer()
    return t.cast(dict[str, t.Any], parsed)


def find_tag(response: str, key: str) -> str | None:
    """Content between the first `<key>` and the nearest `</key>` after it."""
    opening = f"<{key}>"
    start = response.find(opening)
    if start < 0:
        return None
    start += len(opening)
    end = response.find(f"</{key}>", start)
    if end < 0:
        return None
    return response[start:end]


def to_text(value: t.Any) -> str:
    """Render a decoded JSON value as the text a labeler would have typed."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return json.dumps(value)


def extract_raw(parsed: ParsedContainer, key: str, container: ContainerFormat) -> Extraction:
    if isinstance(parsed, MalformedContainer):
        return Extraction(raw=None, failure=ExtractionFailure.MalformedContainer)

    match container:
        case ContainerFormat.Text:
            raw = t.cast(str, parsed)
        case ContainerFormat.XML:
            raw = find_tag(t.cast(str, parsed), key)
        case ContainerFormat.JSON:
            obj = t.cast(dict[str, t.Any], parsed)
            raw = to_text(obj[key]) if key in obj else None

    if raw is None:
        return Extraction(raw=None, failure=ExtractionFailure.Missing)
    return Extraction(raw=raw)


def coerce(raw: str, field_type: FieldType) -> TypedValue | None:
    """Coerce raw text to `field_type`, or None if it does not parse."""
    match field_type:
        case FieldType.String:
            return raw.strip()
        case FieldType.Int:
            s = raw.strip()
            if not INT_PATTERN.fullmatch(s):
                return None
            try:
                return int(s, 10)
            except ValueError:
                # more digits than int() will convert
                return None
        case FieldType.Float:
            s = raw.strip()
            if not FLOAT_PATTERN.fullmatch(s):
                return None
            f = float(s)
            # 1e999 overflows to inf, which cannot be stored as JSON
            return f if math.isfinite(f) else None
        case FieldType.Boolean:
            return BOOLEAN_VALUES.get(raw.strip().lower())


def extract_field(
    parsed: ParsedContainer, key: str, field_type: FieldType, container: ContainerFormat
) -> Extraction:
    """Extract and coerce one field from an already-parsed container."""
    extraction = extract_raw(parsed, key, container)
    if not extraction.ok or extraction.raw is None:
        return extraction

    value = coerce(extraction.raw, field_type)
    if value is None:
        return Extraction(raw=extraction.raw, failure=ExtractionFailure.CoercionFailed)
    return Extraction(raw=extraction.raw, value=value)


def extract(response: str, key: str, field_type: FieldType, container: ContainerFormat) -> Extraction:
    """Extract and coerce one field straight from a raw response."""
    return extract_field(parse_container(response, container), key, field_type, container)
