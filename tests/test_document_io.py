"""Unit tests for loading and saving proposal template documents."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest
from ruamel.yaml import YAML

from proposal_builder.document import (
    StyleOverrides,
    TemplateError,
    default_template,
    load_template,
    save_template,
    template_from_payload,
    template_to_payload,
)
from proposal_builder.store import SectionStore

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write(path: Path, body: str) -> Path:
    path.write_text(dedent(body).strip() + "\n", encoding="utf-8")
    return path


def test_load_template_reads_sections_in_file_order(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "acme.yaml",
        """
        id: tpl-42
        name: ACME rollout
        sections:
          - id: pricing
            kind: pricing
            content: <p>Pricing</p>
            style:
              padding: 0
          - id: intro
            kind: company_intro
            is_visible: false
        global_styling:
          font_family: Georgia
          page_margins:
            top: 40
        """,
    )
    template = load_template(path)
    assert template.section_ids == ("pricing", "intro")
    pricing = template.get_section("pricing")
    assert pricing is not None
    assert pricing.title == "Pricing", "missing titles derive from the kind"
    assert pricing.style == StyleOverrides(padding=0)
    intro = template.get_section("intro")
    assert intro is not None
    assert not intro.is_visible
    assert template.global_styling.font_family == "Georgia"
    assert template.global_styling.page_margins.top == 40
    assert template.global_styling.page_margins.bottom == 20


def test_load_template_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_template(tmp_path / "missing.yaml")


def test_load_template_rejects_non_mapping(tmp_path: Path) -> None:
    path = _write(tmp_path / "list.yaml", "- a\n- b")
    with pytest.raises(TypeError):
        load_template(path)


def test_load_template_rejects_duplicate_ids(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "dupe.yaml",
        """
        name: Dupes
        sections:
          - id: a
          - id: a
        """,
    )
    with pytest.raises(TemplateError, match="Duplicate section id"):
        load_template(path)


def test_load_template_requires_section_ids(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "noid.yaml",
        """
        sections:
          - kind: terms
        """,
    )
    with pytest.raises(TemplateError, match="missing an 'id'"):
        load_template(path)


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    store = SectionStore(default_template())
    store.add_section("pricing")
    store.set_visibility("executive", False)
    path = save_template(store.template, tmp_path / "out" / "proposal.yaml")
    assert load_template(path) == store.template, "YAML round trip should be exact"


def test_save_template_preserves_comments_and_extra_keys(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "proposal.yaml",
        """
        # Owned by the sales team
        owner: sales
        name: Draft
        sections: []
        """,
    )
    save_template(default_template(), path)
    text = path.read_text(encoding="utf-8")
    assert "# Owned by the sales team" in text, "header comment should survive"
    parsed = YAML(typ="safe").load(text)
    assert parsed["owner"] == "sales", "unknown keys should be kept"
    assert [entry["id"] for entry in parsed["sections"]] == ["cover", "executive"]


def test_save_template_refuses_non_mapping_file(tmp_path: Path) -> None:
    path = _write(tmp_path / "list.yaml", "- a")
    with pytest.raises(TemplateError):
        save_template(default_template(), path)


def test_payload_uses_camel_case_and_positions() -> None:
    payload = template_to_payload(default_template())
    cover = payload["sections"][0]
    assert cover["type"] == "cover_page"
    assert cover["isVisible"] is True
    assert cover["styling"] == {
        "fontSize": 24,
        "fontWeight": "bold",
        "alignment": "center",
    }
    assert [entry["position"] for entry in payload["sections"]] == [0, 1]
    assert payload["globalStyling"]["pageMargins"] == {
        "top": 20,
        "right": 20,
        "bottom": 20,
        "left": 20,
    }
    assert payload["globalStyling"]["primaryColor"] == "#0066CC"


def test_payload_sections_sorted_by_position() -> None:
    payload = {
        "id": 7,
        "name": "From server",
        "sections": [
            {"id": "b", "type": "terms", "title": "B", "position": 1},
            {"id": "a", "type": "pricing", "title": "A", "position": 0},
            {"id": "c", "type": "custom", "title": "C", "isLocked": True},
        ],
        "globalStyling": {"fontFamily": "Georgia", "pageMargins": {"left": 10}},
    }
    template = template_from_payload(payload)
    assert template.id == "7"
    assert template.section_ids[:2] == ("a", "b"), "position wins over list order"
    locked = template.get_section("c")
    assert locked is not None
    assert locked.is_locked
    assert template.global_styling.font_family == "Georgia"
    assert template.global_styling.page_margins.left == 10


def test_payload_round_trip_preserves_template() -> None:
    template = default_template()
    assert template_from_payload(template_to_payload(template)) == template
