"""In-memory holder of the proposal template being edited.

:class:`SectionStore` owns the current :class:`~proposal_builder.document.Template`
and exposes the mutations the editor needs. Every mutation builds a new
Template value and swaps it in, so a renderer can tell whether anything changed
with an identity check. An operation that cannot apply (unknown id, index out of
range, moving a section onto itself) leaves the identical Template in place and
logs at DEBUG level instead of raising; losing one edit is preferable to
breaking a live editing session.

The store has no notion of selection or preview mode. That state belongs to
:class:`proposal_builder.editor.EditorSession`.

Example
-------
>>> from proposal_builder.store import SectionStore
>>> store = SectionStore()
>>> store.reorder(0, 1).section_ids
('executive', 'cover')
>>> store.add_section("pricing").title
'PRICING'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from ._constants import NEW_SECTION_CONTENT, NEW_SECTION_FONT_SIZE, NEW_SECTION_WIDTH
from .document import (
    GlobalStyling,
    Section,
    SectionLayout,
    StyleOverrides,
    Template,
    default_template,
)
from .document.helpers import (
    _kind_title,
    _merge_layout,
    _merge_margins,
    _merge_style,
    _pick_fields,
    _unique_section_id,
)

logger = logging.getLogger(__name__)


class SectionStore:
    """Authoritative holder of the template under edit."""

    def __init__(self, template: Template | None = None) -> None:
        """Initialize the store with ``template`` or the built-in default."""
        self._template = template if template is not None else default_template()

    @property
    def template(self) -> Template:
        """Return the current template value."""
        return self._template

    @property
    def sections(self) -> tuple[Section, ...]:
        """Return every section, hidden ones included, in document order."""
        return self._template.sections

    @property
    def section_ids(self) -> tuple[str, ...]:
        return self._template.section_ids

    def visible_sections(self) -> tuple[Section, ...]:
        """Return the sections shown on the canvas and in the preview."""
        return self._template.visible_sections()

    def section(self, section_id: str) -> Section | None:
        """Return the section with ``section_id`` or ``None``."""
        return self._template.get_section(section_id)

    def index_of(self, section_id: str) -> int | None:
        """Return the full-array index of ``section_id`` or ``None``."""
        try:
            return self.section_ids.index(section_id)
        except ValueError:
            return None

    def replace(self, template: Template) -> Template:
        """Swap in a template supplied from outside (for example a fresh load)."""
        self._template = template
        return template

    def reorder(self, from_index: int, to_index: int) -> Template:
        """Move the section at ``from_index`` to ``to_index``.

        Sections between the two positions shift by one. Indices address the
        full section array, hidden sections included.

        Parameters
        ----------
        from_index : int
            Current position of the section to move.
        to_index : int
            Position the section occupies afterwards.

        Returns
        -------
        Template
            The new template, or the identical current template when the move
            is a no-op or either index is out of range.
        """
        count = len(self._template.sections)
        if not (0 <= from_index < count and 0 <= to_index < count):
            logger.debug(
                "ignoring reorder %s -> %s outside %s sections",
                from_index,
                to_index,
                count,
            )
            return self._template
        if from_index == to_index:
            return self._template
        sections = list(self._template.sections)
        moved = sections.pop(from_index)
        sections.insert(to_index, moved)
        return self._commit(sections=tuple(sections))

    def update_section(
        self, section_id: str, patch: typ.Mapping[str, typ.Any]
    ) -> Template:
        """Shallow-merge ``patch`` into the section with ``section_id``.

        ``style`` and ``layout`` values may be mappings, which are merged into
        the section's existing overrides rather than replacing them. Keys that
        are not section fields, and ``id`` itself, are ignored.
        """
        index = self.index_of(section_id)
        if index is None:
            logger.debug("ignoring update of unknown section %r", section_id)
            return self._template
        current = self._template.sections[index]
        changes = _pick_fields(Section, patch)
        changes.pop("id", None)
        if not changes:
            return self._template
        if "style" in changes:
            changes["style"] = _merge_style(current.style, changes["style"])
        if "layout" in changes:
            changes["layout"] = _merge_layout(current.layout, changes["layout"])
        updated = dc.replace(current, **changes)
        if updated == current:
            return self._template
        sections = list(self._template.sections)
        sections[index] = updated
        return self._commit(sections=tuple(sections))

    def add_section(self, kind: str) -> Section:
        """Append a new section of ``kind`` and return it.

        The section receives a fresh unique id, an upper-case title derived
        from ``kind`` and placeholder content. New sections always go last.
        """
        title = _kind_title(kind)
        section = Section(
            id=_unique_section_id(self.section_ids),
            kind=kind,
            title=title,
            content=NEW_SECTION_CONTENT.format(title=title),
            style=StyleOverrides(font_size=NEW_SECTION_FONT_SIZE),
            layout=SectionLayout(width=NEW_SECTION_WIDTH),
        )
        self._commit(sections=(*self._template.sections, section))
        return section

    def duplicate_section(self, section_id: str) -> Section | None:
        """Insert a copy of ``section_id`` right after it and return the copy."""
        index = self.index_of(section_id)
        if index is None:
            logger.debug("ignoring duplicate of unknown section %r", section_id)
            return None
        source = self._template.sections[index]
        copy = dc.replace(source, id=_unique_section_id(self.section_ids))
        sections = list(self._template.sections)
        sections.insert(index + 1, copy)
        self._commit(sections=tuple(sections))
        return copy

    def delete_section(self, section_id: str) -> Template:
        """Remove the section with ``section_id``; unknown ids are ignored."""
        remaining = tuple(
            section for section in self._template.sections if section.id != section_id
        )
        if len(remaining) == len(self._template.sections):
            logger.debug("ignoring delete of unknown section %r", section_id)
            return self._template
        return self._commit(sections=remaining)

    def set_visibility(self, section_id: str, visible: bool) -> Template:
        return self.update_section(section_id, {"is_visible": visible})

    def toggle_visibility(self, section_id: str) -> Template:
        section = self.section(section_id)
        if section is None:
            logger.debug("ignoring visibility toggle of unknown section %r", section_id)
            return self._template
        return self.set_visibility(section_id, not section.is_visible)

    def set_locked(self, section_id: str, locked: bool) -> Template:
        return self.update_section(section_id, {"is_locked": locked})

    def set_global_styling(self, patch: typ.Mapping[str, typ.Any]) -> Template:
        """Shallow-merge ``patch`` into the template's global styling.

        A ``page_margins`` mapping is merged side by side into the current
        margins, so ``{"page_margins": {"top": 40}}`` keeps the other three.
        """
        current = self._template.global_styling
        changes = _pick_fields(GlobalStyling, patch)
        if not changes:
            return self._template
        if "page_margins" in changes:
            changes["page_margins"] = _merge_margins(
                current.page_margins, changes["page_margins"]
            )
        updated = dc.replace(current, **changes)
        if updated == current:
            return self._template
        return self._commit(global_styling=updated)

    def rename(
        self, *, name: str | None = None, description: str | None = None
    ) -> Template:
        """Update the template name and/or description."""
        changes: dict[str, str] = {}
        if name is not None:
            changes["name"] = name
        if description is not None:
            changes["description"] = description
        if not changes:
            return self._template
        return self._commit(**changes)

    def _commit(self, **changes: typ.Any) -> Template:
        self._template = dc.replace(self._template, **changes)
        return self._template


__all__ = ["SectionStore"]
