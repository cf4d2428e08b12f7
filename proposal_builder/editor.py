"""Editing session that ties the store, drag controller and renderer together.

The session owns the ephemeral UI state that does not belong in a template:
which section is selected and whether the canvas shows the preview. Document
mutations go through :attr:`EditorSession.store`; drag gestures through
:attr:`EditorSession.drag`.

Example
-------
>>> from proposal_builder.editor import EditorSession
>>> session = EditorSession()
>>> session.select("cover")
'cover'
>>> session.update_selected_style("padding", 24).sections[0].style.padding
24
>>> session.toggle_preview()
True
"""

from __future__ import annotations

import logging
import typing as typ

from .dragdrop import DragReorderController
from .rendering import ProposalRenderer
from .store import SectionStore
from .styles import STYLE_TOGGLES, RenderMode, check_style_range, toggle_style

if typ.TYPE_CHECKING:
    from .document import Section, Template

logger = logging.getLogger(__name__)

TemplateLoader = typ.Callable[[], "Template | None"]
TemplateCallback = typ.Callable[["Template"], typ.Any]


class EditorSession:
    """Hold selection and preview state around a :class:`SectionStore`."""

    def __init__(
        self,
        template: Template | None = None,
        *,
        loader: TemplateLoader | None = None,
        on_save: TemplateCallback | None = None,
        on_export: TemplateCallback | None = None,
        renderer: ProposalRenderer | None = None,
    ) -> None:
        """Create a session.

        Parameters
        ----------
        template : Template, optional
            Template to edit. When omitted, ``loader`` is asked for one and
            the built-in default is used if it returns ``None``.
        loader : callable, optional
            Zero-argument callable returning a template or ``None``.
        on_save, on_export : callable, optional
            Receive the current template on :meth:`save` and :meth:`export`.
        renderer : ProposalRenderer, optional
            Renderer used by :meth:`render`.
        """
        if template is None and loader is not None:
            template = loader()
        self.store = SectionStore(template)
        self.drag = DragReorderController(self.store)
        self.selected_id: str | None = None
        self.preview_mode = False
        self._on_save = on_save
        self._on_export = on_export
        self._renderer = renderer

    @property
    def template(self) -> Template:
        return self.store.template

    @property
    def mode(self) -> RenderMode:
        return RenderMode.PREVIEW if self.preview_mode else RenderMode.EDIT

    def select(self, section_id: str | None) -> str | None:
        """Select ``section_id``; ``None`` or an unknown id clears the selection."""
        if section_id is not None and self.store.section(section_id) is None:
            logger.debug("clearing selection for unknown section %r", section_id)
            section_id = None
        self.selected_id = section_id
        return section_id

    def selected_section(self) -> Section | None:
        if self.selected_id is None:
            return None
        return self.store.section(self.selected_id)

    def toggle_preview(self) -> bool:
        """Flip between edit and preview mode and return the new preview flag."""
        self.preview_mode = not self.preview_mode
        return self.preview_mode

    def delete_section(self, section_id: str) -> Template:
        """Delete ``section_id``, clearing the selection if it pointed there."""
        if self.selected_id == section_id:
            self.selected_id = None
        return self.store.delete_section(section_id)

    def update_selected_style(self, prop: str, value: typ.Any) -> Template:
        """Set one style override on the selected section.

        Slider-backed properties are checked against their ranges first.
        Without a selection the template is returned unchanged.

        Raises
        ------
        ValueError
            If ``value`` is outside the slider range for ``prop``.
        """
        section = self.selected_section()
        if section is None:
            return self.store.template
        if value is not None:
            check_style_range(prop, value)
        return self.store.update_section(section.id, {"style": {prop: value}})

    def toggle_selected_style(self, prop: str) -> Template:
        """Flip bold, italic or underline on the selected section.

        Raises
        ------
        KeyError
            If ``prop`` is not a toggleable style property.
        """
        if prop not in STYLE_TOGGLES:
            msg = f"{prop!r} is not a toggleable style"
            raise KeyError(msg)
        section = self.selected_section()
        if section is None:
            return self.store.template
        style = toggle_style(section.style, prop)
        return self.store.update_section(section.id, {"style": style})

    def save(self) -> typ.Any:
        """Hand the current template to ``on_save`` and return its result."""
        if self._on_save is None:
            logger.debug("no save handler configured")
            return None
        return self._on_save(self.store.template)

    def export(self) -> typ.Any:
        """Hand the current template to ``on_export`` and return its result."""
        if self._on_export is None:
            logger.debug("no export handler configured")
            return None
        return self._on_export(self.store.template)

    def render(self) -> str:
        """Render the current template in the current mode."""
        if self._renderer is None:
            self._renderer = ProposalRenderer()
        selected = None if self.preview_mode else self.selected_id
        return self._renderer.render(self.store.template, self.mode, selected)


__all__ = ["EditorSession"]
