"""Unit tests for HTML rendering of proposal templates."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from bs4 import BeautifulSoup

from proposal_builder.document import GlobalStyling, PageMargins, default_template
from proposal_builder.rendering import ProposalPageBuilder, ProposalRenderer
from proposal_builder.store import SectionStore

if typ.TYPE_CHECKING:
    from pathlib import Path


def _render(
    template: typ.Any, mode: str, selected_id: str | None = None
) -> BeautifulSoup:
    html = ProposalRenderer().render(template, mode, selected_id)
    return BeautifulSoup(html, "html.parser")


def test_canvas_uses_page_margins_and_global_font() -> None:
    template = dc.replace(
        default_template(),
        global_styling=GlobalStyling(
            font_family="Georgia", page_margins=PageMargins(top=10, left=30)
        ),
    )
    canvas = _render(template, "preview").select_one(".proposal-canvas")
    assert canvas is not None
    style = canvas["style"]
    assert "width: 794px" in style
    assert "padding: 10px 20px 20px 30px" in style, f"unexpected canvas {style!r}"
    assert "font-family: Georgia" in style


def test_sections_carry_resolved_inline_style() -> None:
    soup = _render(default_template(), "preview")
    cover = soup.select_one('[data-section-id="cover"]')
    assert cover is not None
    style = cover["style"]
    assert "font-size: 24px" in style
    assert "text-align: center" in style
    assert "margin: 0px 0" in style
    assert "font-family: Inter" in style


def test_edit_mode_marks_selection_and_kind_badge() -> None:
    soup = _render(default_template(), "edit", "executive")
    executive = soup.select_one('[data-section-id="executive"]')
    assert executive is not None
    assert "is-selected" in executive["class"]
    badge = executive.select_one(".proposal-section__badge")
    assert badge is not None
    assert badge.get_text(strip=True) == "executive summary"
    body = soup.find("body")
    assert body is not None
    assert body["data-mode"] == "edit"


def test_preview_ignores_selection_and_badges() -> None:
    soup = _render(default_template(), "preview", "executive")
    assert soup.select(".is-selected") == []
    assert soup.select(".proposal-section__badge") == []


def test_sections_render_in_array_order() -> None:
    store = SectionStore(default_template())
    store.reorder(0, 1)
    soup = _render(store.template, "preview")
    ids = [node["data-section-id"] for node in soup.select("[data-section-id]")]
    assert ids == ["executive", "cover"]


def test_content_is_sanitized() -> None:
    store = SectionStore(default_template())
    store.update_section(
        "cover", {"content": "<p>Hello</p><script>alert('x')</script>"}
    )
    soup = _render(store.template, "preview")
    assert soup.find("script") is None, "section scripts must never render"
    cover = soup.select_one('[data-section-id="cover"]')
    assert cover is not None
    assert cover.get_text(strip=True) == "Hello"


def test_description_renders_as_markdown_in_edit_mode() -> None:
    store = SectionStore(default_template())
    store.rename(description="Rollout for **ACME**")
    soup = _render(store.template, "edit")
    description = soup.select_one(".proposal-canvas__description")
    assert description is not None
    strong = description.find("strong")
    assert strong is not None
    assert strong.get_text() == "ACME"


def test_unsafe_logo_url_is_dropped() -> None:
    template = dc.replace(
        default_template(),
        global_styling=GlobalStyling(logo_url="javascript:alert(1)"),
    )
    soup = _render(template, "preview")
    assert soup.select_one(".proposal-canvas__logo") is None


def test_section_style_overrides_cannot_inject_declarations() -> None:
    store = SectionStore(default_template())
    store.update_section(
        "cover",
        {
            "style": {
                "background_color": (
                    "red; background-image: url(https://evil.example/x)"
                ),
                "font_family": "Georgia",
            }
        },
    )
    cover = _render(store.template, "preview").select_one('[data-section-id="cover"]')
    assert cover is not None
    style = cover["style"]
    assert "url(" not in style, f"style override leaked a url: {style!r}"
    assert "background-color" not in style
    assert "font-family: Georgia" in style
    assert "font-size: 24px" in style


def test_background_image_cannot_break_out_of_css_url() -> None:
    template = dc.replace(
        default_template(),
        global_styling=GlobalStyling(
            background_image=(
                "https://a.example/x'); background: url('https://evil.example/y"
            ),
            font_family="Inter; background: red",
            header_font="Inter } body { display: none",
            primary_color="red; } * { color: blue",
        ),
    )
    soup = _render(template, "edit", "cover")
    canvas = soup.select_one(".proposal-canvas")
    assert canvas is not None
    style = canvas["style"]
    assert "evil.example" not in style, f"unexpected canvas style {style!r}"
    assert "background-image" not in style
    assert "font-family: Inter;" in style, "unsafe fonts fall back to the default"
    stylesheet = soup.find("style")
    assert stylesheet is not None
    css = stylesheet.get_text()
    assert "display: none" not in css
    assert "color: blue" not in css
    assert "outline: 2px solid #0066CC" in css


def test_plain_background_image_is_kept() -> None:
    template = dc.replace(
        default_template(),
        global_styling=GlobalStyling(background_image="https://cdn.example/bg.png"),
    )
    canvas = _render(template, "preview").select_one(".proposal-canvas")
    assert canvas is not None
    assert "background-image: url('https://cdn.example/bg.png')" in canvas["style"]


def test_page_builder_writes_html(tmp_path: Path) -> None:
    output = tmp_path / "site" / "proposal.html"
    written = ProposalPageBuilder(default_template(), output).run("preview")
    assert written == output
    text = output.read_text(encoding="utf-8")
    assert text.endswith("\n")
    assert "Professional Proposal" in text
