"""JSON view of decoded documents."""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from tachoparse.core.base.primitives import CodedText
from tachoparse.core.base.tables import Code
from tachoparse.core.base.types import Generation


def to_dict(value: Any) -> Any:
    """Convert a decoded tree into plain JSON types.

    Absent fields stay as None so every key of a record is always present.
    """
    if isinstance(value, Generation):
        return value.label
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Code):
        return {"value": value.value, "name": value.name}
    if isinstance(value, CodedText):
        return {"code_page": value.code_page, "text": value.text}
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex().upper()
    if is_dataclass(value):
        return {f.name: to_dict(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [to_dict(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_dict(v) for k, v in value.items()}
    raise TypeError(f"cannot export {type(value).__name__}")


def to_json(document: Any, indent: int | None = 2) -> str:
    return json.dumps(to_dict(document), indent=indent, ensure_ascii=False)
