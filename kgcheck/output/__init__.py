"""
Output — Machine-readable report rendering

Commands build an OutputSpec; `render_json` turns it into text.
Text reports are laid out with presentation.OutputTemplate.

Usage:
    from kgcheck.output import OutputSpec, render_json

    print(render_json(OutputSpec(data={"results": [...]}, title="validate")))
"""

from dataclasses import dataclass
from typing import Any, Optional

from .json import JsonRenderer


FORMATS = ("text", "json")


@dataclass
class OutputSpec:
    """
    Data envelope that commands hand to renderers.

    Attributes:
        data: The report data (dict, list, or objects with to_dict())
        title: Optional title wrapped around the data
    """
    data: Any
    title: Optional[str] = None


def render_json(spec: OutputSpec, compact: bool = False) -> str:
    return JsonRenderer(compact=compact).render(spec)


__all__ = ["OutputSpec", "JsonRenderer", "render_json", "FORMATS"]
