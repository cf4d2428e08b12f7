"""Serialize proposal templates to YAML files and REST payloads.

Two shapes leave the in-memory model:

* a snake_case mapping written to template YAML files with ruamel.yaml, in
  round-trip mode so hand-written comments in an existing file survive a save;
* a camelCase payload matching the web client's JSON (``styling``,
  ``isVisible``, ``globalStyling`` ...), used by
  :mod:`proposal_builder.client`.

Section order is the tuple order inside :class:`Template`. The payload adds a
``position`` key per section because the server stores sections as an
unordered JSON column; the key is generated here and nowhere else.

Example
-------
>>> from proposal_builder.document import default_template, template_to_payload
>>> payload = template_to_payload(default_template())
>>> [entry["position"] for entry in payload["sections"]]
[0, 1]
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from .helpers import _compact
from .loader import template_from_mapping
from .models import Section, Template, TemplateError

if typ.TYPE_CHECKING:
    from pathlib import Path

_CAMEL_BOUNDARY = re.compile(r"_([a-z])")
_SNAKE_BOUNDARY = re.compile(r"(?<!^)([A-Z])")


def _to_camel(name: str) -> str:
    return _CAMEL_BOUNDARY.sub(lambda match: match.group(1).upper(), name)


def _to_snake(name: str) -> str:
    return _SNAKE_BOUNDARY.sub(r"_\1", name).lower()


def _section_to_mapping(section: Section) -> dict[str, typ.Any]:
    return {
        "id": section.id,
        "kind": section.kind,
        "title": section.title,
        "content": section.content,
        "style": _compact(dc.asdict(section.style)),
        "layout": _compact(dc.asdict(section.layout)),
        "is_visible": section.is_visible,
        "is_locked": section.is_locked,
    }


def template_to_mapping(template: Template) -> dict[str, typ.Any]:
    """Return the snake_case mapping stored in template YAML files."""
    styling = dc.asdict(template.global_styling)
    return {
        "id": template.id,
        "name": template.name,
        "description": template.description,
        "sections": [_section_to_mapping(section) for section in template.sections],
        "global_styling": _compact(styling),
    }


def _build_roundtrip_yaml() -> YAML:
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.width = 120
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def save_template(template: Template, path: Path) -> Path:
    """Write ``template`` to ``path`` as YAML and return the path.

    When ``path`` already holds a template document, it is loaded in
    round-trip mode and only the template keys are replaced, so comments and
    any extra top-level keys are kept.

    Raises
    ------
    TemplateError
        If the existing file's top level is not a mapping.
    """
    yaml = _build_roundtrip_yaml()
    document: CommentedMap = CommentedMap()
    if path.exists():
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.load(handle)
        if loaded is not None:
            if not isinstance(loaded, CommentedMap):
                msg = f"Existing template file '{path}' must hold a mapping."
                raise TemplateError(msg)
            document = loaded

    for key, value in template_to_mapping(template).items():
        document[key] = value

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        yaml.dump(document, handle)
    return path


def _camel_record(values: typ.Mapping[str, typ.Any]) -> dict[str, typ.Any]:
    return {_to_camel(key): value for key, value in _compact(values).items()}


def _snake_record(values: typ.Mapping[str, typ.Any] | None) -> dict[str, typ.Any]:
    if not isinstance(values, typ.Mapping):
        return {}
    return {_to_snake(str(key)): value for key, value in values.items()}


def template_to_payload(template: Template) -> dict[str, typ.Any]:
    """Return the camelCase JSON payload used by the proposal templates API."""
    styling = dc.asdict(template.global_styling)
    margins = styling.pop("page_margins")
    global_styling = _camel_record(styling)
    global_styling["pageMargins"] = _camel_record(margins)
    return {
        "id": template.id,
        "name": template.name,
        "description": template.description,
        "sections": [
            {
                "id": section.id,
                "type": section.kind,
                "title": section.title,
                "content": section.content,
                "styling": _camel_record(dc.asdict(section.style)),
                "layout": _camel_record(dc.asdict(section.layout)),
                "isVisible": section.is_visible,
                "isLocked": section.is_locked,
                "position": position,
            }
            for position, section in enumerate(template.sections)
        ],
        "globalStyling": global_styling,
    }


def _payload_position(entry: tuple[int, object]) -> tuple[int | float, int]:
    index, payload = entry
    position = payload.get("position") if isinstance(payload, typ.Mapping) else None
    if isinstance(position, (int, float)) and not isinstance(position, bool):
        return position, index
    return index, index


def template_from_payload(payload: typ.Mapping[str, typ.Any]) -> Template:
    """Build a Template from an API payload.

    Sections are ordered by their ``position`` key when present and by list
    order otherwise; the ``position`` key is discarded afterwards.

    Raises
    ------
    TemplateError
        If a section entry is malformed or section ids are duplicated.
    """
    entries = payload.get("sections") or []
    if not isinstance(entries, list):
        entries = []
    ordered = [entry for _, entry in sorted(enumerate(entries), key=_payload_position)]
    sections: list[object] = []
    for entry in ordered:
        if not isinstance(entry, typ.Mapping):
            sections.append(entry)
            continue
        sections.append(
            {
                "id": entry.get("id"),
                "kind": entry.get("type") or entry.get("kind"),
                "title": entry.get("title"),
                "content": entry.get("content"),
                "style": _snake_record(entry.get("styling")),
                "layout": _snake_record(entry.get("layout")),
                "is_visible": entry.get("isVisible", True),
                "is_locked": entry.get("isLocked", False),
            }
        )
    global_styling = _snake_record(payload.get("globalStyling"))
    if "page_margins" in global_styling:
        global_styling["page_margins"] = _snake_record(global_styling["page_margins"])
    return template_from_mapping(
        {
            "id": payload.get("id"),
            "name": payload.get("name"),
            "description": payload.get("description"),
            "sections": sections,
            "global_styling": global_styling,
        }
    )


__all__ = [
    "save_template",
    "template_from_payload",
    "template_to_mapping",
    "template_to_payload",
]
