"""
Схема JSON-отчёта `scaffold inspect`.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .template.elements import ParsedTemplate


class ElementInfo(BaseModel):
    index: int
    name: str
    path: Optional[str] = None
    text: str
    vars: Dict[str, str] = Field(default_factory=dict)


class PartialInfo(BaseModel):
    name: str
    path: str
    prefix: str


class InspectReport(BaseModel):
    path: str
    section: str = ""
    elements: List[ElementInfo] = Field(default_factory=list)
    fields: Dict[str, List[int]] = Field(default_factory=dict)
    partials: List[PartialInfo] = Field(default_factory=list)


def build_inspect_report(path: str, section: str, parsed: ParsedTemplate) -> InspectReport:
    return InspectReport(
        path=path,
        section=section,
        elements=[
            ElementInfo(index=i, name=el.name, path=el.path, text=el.text, vars=dict(el.vars))
            for i, el in enumerate(parsed.elements)
        ],
        fields=parsed.field_index.as_dict(),
        partials=[PartialInfo(name=p.name, path=p.path, prefix=p.prefix) for p in parsed.partials],
    )


__all__ = ["ElementInfo", "PartialInfo", "InspectReport", "build_inspect_report"]
