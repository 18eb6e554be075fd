"""JSON output for grading results: CLI printing and HTTP responses."""

from __future__ import annotations

import enum
import json as pyjson
import typing as t

import fastapi
import pydantic as p

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]


def encode_enum(obj: enum.Enum) -> JSONValue:
    return obj.value


def encode_pydantic(obj: p.BaseModel) -> dict[str, JSONValue]:
    # our BaseModel dumps by alias, so stored results keep their camelCase keys
    return obj.model_dump(mode="json")


class JSONEncoder(pyjson.JSONEncoder):
    def get_encoders(self) -> dict[type, t.Callable[[t.Any], JSONValue]]:
        return {enum.Enum: encode_enum}

    def default(self, o: t.Any) -> JSONValue:
        if isinstance(o, p.BaseModel):
            return encode_pydantic(o)

        encoders = self.get_encoders()
        for tp, encoder in encoders.items():
            if isinstance(o, tp):
                return encoder(o)

        return pyjson.JSONEncoder.default(self, o)


def dumps(obj: t.Any, *, cls: type[pyjson.JSONEncoder] = JSONEncoder, **kw: t.Any) -> str:
    return pyjson.dumps(obj, cls=cls, **kw)


class FastAPIJSONResponse(fastapi.responses.JSONResponse):
    """Renders with `JSONEncoder` and refuses NaN and infinity."""

    def render(self, content: t.Any) -> bytes:
        return dumps(content, ensure_ascii=False, allow_nan=False, separators=(",", ":")).encode("utf-8")
