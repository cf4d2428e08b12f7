"""Load proposal template YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import _build_global_styling, _build_sections, _optional_str
from .models import GlobalStyling, Section, StyleOverrides, SectionLayout, Template

DEFAULT_TEMPLATE_ID = "new"


def default_template() -> Template:
    """Return the built-in two-section template used when nothing is loaded.

    Examples
    --------
    >>> from proposal_builder.document import default_template
    >>> default_template().section_ids
    ('cover', 'executive')
    """
    return Template(
        id=DEFAULT_TEMPLATE_ID,
        name="Untitled Proposal",
        description="Custom proposal template",
        sections=(
            Section(
                id="cover",
                kind="cover_page",
                title="Cover Page",
                content=(
                    "<h1>Professional Proposal</h1>"
                    "<p>Prepared for [Customer Name]</p>"
                ),
                style=StyleOverrides(
                    font_size=24, font_weight="bold", alignment="center"
                ),
                layout=SectionLayout(width="100%"),
            ),
            Section(
                id="executive",
                kind="executive_summary",
                title="Executive Summary",
                content=(
                    "<h2>Executive Summary</h2>"
                    "<p>This proposal outlines our recommended solution...</p>"
                ),
                style=StyleOverrides(font_size=16),
                layout=SectionLayout(width="100%"),
            ),
        ),
        global_styling=GlobalStyling(),
    )


def template_from_mapping(raw: typ.Mapping[str, typ.Any]) -> Template:
    """Build a Template from a snake_case mapping such as a parsed YAML file.

    Raises
    ------
    TemplateError
        If a section entry is malformed or two sections share an id.
    """
    sections_raw = raw.get("sections") or []
    if not isinstance(sections_raw, list):
        sections_raw = []
    return Template(
        id=_optional_str(raw.get("id")) or DEFAULT_TEMPLATE_ID,
        name=str(raw.get("name") or "Untitled Proposal"),
        description=str(raw.get("description") or ""),
        sections=_build_sections(sections_raw),
        global_styling=_build_global_styling(raw.get("global_styling")),
    )


def load_template(path: Path) -> Template:
    """Load a proposal template from a YAML file.

    Parameters
    ----------
    path : Path
        Filesystem path to the template YAML (for example, ``proposal.yaml``).

    Returns
    -------
    Template
        Parsed template with sections in file order.

    Raises
    ------
    FileNotFoundError
        If the template file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    TemplateError
        If a section entry is malformed or section ids are duplicated.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.
    """
    if not path.exists():
        msg = f"Template file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    return template_from_mapping(loaded)


__all__ = [
    "DEFAULT_TEMPLATE_ID",
    "default_template",
    "load_template",
    "template_from_mapping",
]
