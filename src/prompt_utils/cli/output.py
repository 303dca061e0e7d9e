"""CLI output formatting utilities."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from typing import Any, cast

from prompt_utils.lib.serialization import to_jsonable

type JSONScalar = str | int | float | bool | None
type JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]

ABSENT = "-"


def _to_json_value(value: Any) -> JSONValue:
    return cast("JSONValue", to_jsonable(value))


def _pairs(value: dict[str, JSONValue], prefix: str = "") -> Iterator[str]:
    for key, item in value.items():
        if key == "fact":
            continue
        name = f"{prefix}{key}"
        if isinstance(item, dict):
            # Nested summaries flatten to dotted keys.
            yield from _pairs(item, f"{name}.")
        else:
            yield f"{name}={_text_value(item)}"


def _text_value(value: JSONValue) -> str:
    if value is None:
        return ABSENT
    if isinstance(value, dict):
        return " ".join(_pairs(cast("dict[str, JSONValue]", value)))
    if isinstance(value, list):
        return json.dumps(value)
    return str(value)


def facts_text(facts: Mapping[str, object]) -> str:
    """Render facts as `name  key=value ...` lines with aligned names."""

    width = max((len(name) for name in facts), default=0)
    return "\n".join(
        f"{name.ljust(width)}  {_text_value(_to_json_value(value))}" for name, value in facts.items()
    )


def emit_facts(facts: Mapping[str, object], *, json_mode: bool) -> None:
    if json_mode:
        print(json.dumps(_to_json_value(dict(facts)), sort_keys=True))
        return
    print(facts_text(facts))
