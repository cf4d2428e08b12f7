"""Render proposal templates to HTML in edit or preview mode.

Both modes share one Jinja template and one style cascade, so the preview is
the edit canvas minus editing chrome. Only visible sections render, in
document order. Edit mode adds drag handles (except on locked sections),
kind badges, selection markers, and placeholders for empty sections; preview
mode renders exactly what is stored.

Section content always passes through
:func:`~proposal_builder.rendering.sanitizer.sanitize_html` before it is marked
safe for the template. Style values written into ``style`` attributes and the
page stylesheet are checked the same way; unsafe ones are dropped or replaced
with the template defaults.

Example
-------
>>> from proposal_builder.document import default_template
>>> from proposal_builder.rendering import ProposalRenderer
>>> html = ProposalRenderer().render(default_template(), "preview")
>>> "Professional Proposal" in html
True
"""

from __future__ import annotations

import datetime as dt
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from markdown import markdown

from proposal_builder._constants import CANVAS_WIDTH_PX
from proposal_builder.document.helpers import _kind_label
from proposal_builder.rendering.models import CanvasView, SectionView
from proposal_builder.document import GlobalStyling
from proposal_builder.rendering.sanitizer import (
    _safe_url,
    safe_css_url,
    safe_css_value,
    safe_declarations,
    sanitize_html,
)
from proposal_builder.styles import (
    RenderMode,
    css_declarations,
    resolve_style,
    section_body,
)

if typ.TYPE_CHECKING:
    from proposal_builder.document import Section, Template

_IMAGE_SCHEMES = frozenset({"http", "https"})
_DEFAULT_STYLING = GlobalStyling()


def _optional_url(value: str | None) -> str | None:
    if not value:
        return None
    return _safe_url(value, _IMAGE_SCHEMES)


def _css_or_default(value: str, default: str) -> str:
    return safe_css_value(value) or default


def _padding(*sides: object) -> str:
    return " ".join(f"{side}px" for side in sides)


class ProposalRenderer:
    """Render a template's canvas through the shared Jinja templates."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        """Initialize the Jinja environment.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing ``proposal_page.jinja``. Defaults to the
            package ``templates`` directory.
        """
        self.templates_dir = (
            templates_dir or Path(__file__).resolve().parents[1] / "templates"
        )
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("proposal_page.jinja")

    def section_views(
        self,
        template: Template,
        mode: RenderMode | str,
        selected_id: str | None = None,
    ) -> list[SectionView]:
        """Build view models for the visible sections of ``template``."""
        render_mode = RenderMode(mode)
        return [
            self._section_view(
                section, template.global_styling, render_mode, selected_id
            )
            for section in template.visible_sections()
        ]

    def render(
        self,
        template: Template,
        mode: RenderMode | str = RenderMode.EDIT,
        selected_id: str | None = None,
    ) -> str:
        """Render ``template`` as a complete HTML document.

        Parameters
        ----------
        template : Template
            The template to render; always the current value, never a copy.
        mode : RenderMode or str, optional
            ``"edit"`` (default) or ``"preview"``.
        selected_id : str, optional
            Section to mark as selected in edit mode.

        Returns
        -------
        str
            HTML ending with a newline.

        Raises
        ------
        ValueError
            If ``mode`` is not a known render mode.
        """
        render_mode = RenderMode(mode)
        styling = template.global_styling
        context = {
            "template": template,
            "mode": render_mode.value,
            "editing": render_mode is RenderMode.EDIT,
            "sections": self.section_views(template, render_mode, selected_id),
            "section_count": len(template.sections),
            "canvas": self._canvas_view(styling),
            "description_html": self._render_description(template.description),
            "generated_at": dt.datetime.now(dt.UTC),
        }
        html = self.template.render(**context)
        if not html.endswith("\n"):
            html += "\n"
        return html

    @staticmethod
    def _section_view(
        section: Section,
        styling: GlobalStyling,
        mode: RenderMode,
        selected_id: str | None,
    ) -> SectionView:
        editing = mode is RenderMode.EDIT
        return SectionView(
            id=section.id,
            kind=section.kind,
            kind_label=_kind_label(section.kind),
            title=section.title,
            body_html=sanitize_html(section_body(section, mode)),
            style=safe_declarations(
                css_declarations(resolve_style(section, styling))
            ),
            is_selected=editing and section.id == selected_id,
            is_locked=section.is_locked,
        )

    @staticmethod
    def _canvas_view(styling: GlobalStyling) -> CanvasView:
        margins = styling.page_margins
        defaults = _DEFAULT_STYLING.page_margins
        return CanvasView(
            width_px=CANVAS_WIDTH_PX,
            padding=_css_or_default(
                _padding(margins.top, margins.right, margins.bottom, margins.left),
                _padding(defaults.top, defaults.right, defaults.bottom, defaults.left),
            ),
            font_family=_css_or_default(
                styling.font_family, _DEFAULT_STYLING.font_family
            ),
            header_font=_css_or_default(
                styling.header_font, _DEFAULT_STYLING.header_font
            ),
            primary_color=_css_or_default(
                styling.primary_color, _DEFAULT_STYLING.primary_color
            ),
            logo_url=_optional_url(styling.logo_url),
            background_image=(
                safe_css_url(styling.background_image, _IMAGE_SCHEMES)
                if styling.background_image
                else None
            ),
        )

    @staticmethod
    def _render_description(text: str) -> str:
        normalized = (text or "").strip()
        if not normalized:
            return ""
        return sanitize_html(markdown(normalized, extensions=["sane_lists"]))


class ProposalPageBuilder:
    """Write a rendered proposal page to disk."""

    def __init__(
        self,
        template: Template,
        output: Path,
        *,
        renderer: ProposalRenderer | None = None,
    ) -> None:
        self.template = template
        self.output = output
        self.renderer = renderer or ProposalRenderer()

    def run(
        self,
        mode: RenderMode | str = RenderMode.PREVIEW,
        selected_id: str | None = None,
    ) -> Path:
        """Render and write the page HTML, returning the output path.

        Parent directories are created as needed and the file is written as
        UTF-8. Filesystem errors propagate to the caller.
        """
        self.output.parent.mkdir(parents=True, exist_ok=True)
        html = self.renderer.render(self.template, mode, selected_id)
        self.output.write_text(html, encoding="utf-8")
        return self.output


__all__ = ["ProposalPageBuilder", "ProposalRenderer"]
