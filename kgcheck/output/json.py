"""
JsonRenderer — Render report data as JSON for piping

Supports:
- Pretty-printed output (default) or compact single line
- Clean data (strips internal keys starting with _)
- Objects exposing to_dict() (findings, results, records)
"""

from typing import TYPE_CHECKING, Any

import orjson

if TYPE_CHECKING:
    from . import OutputSpec


class JsonRenderer:
    """Render an OutputSpec as JSON text."""

    def __init__(self, compact: bool = False):
        self.compact = compact

    def render(self, spec: "OutputSpec") -> str:
        data = self._clean_data(spec.data)

        if spec.title:
            output = {"title": spec.title, "data": data}
        else:
            output = data

        option = orjson.OPT_SORT_KEYS
        if not self.compact:
            option |= orjson.OPT_INDENT_2
        return orjson.dumps(output, default=self._json_serializer, option=option).decode("utf-8")

    def _clean_data(self, data: Any) -> Any:
        if hasattr(data, "to_dict"):
            data = data.to_dict()
        if isinstance(data, dict):
            return {
                k: self._clean_data(v)
                for k, v in data.items()
                if not str(k).startswith("_")
            }
        if isinstance(data, (list, tuple)):
            return [self._clean_data(item) for item in data]
        return data

    def _json_serializer(self, obj: Any) -> Any:
        """Fallback for types orjson does not serialize natively."""
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        if isinstance(obj, (set, frozenset)):
            return sorted(obj)
        return str(obj)
