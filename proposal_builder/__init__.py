"""Section editor for visually built proposal templates.

This package holds the proposal template model, the section store and drag
reorder controller that edit it, the HTML renderer for the A4 canvas, and the
``proposal`` console script that drives them from the shell.

Exports
-------
- ``app``: Cyclopts application with the ``proposal`` subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``EditorSession``, ``SectionStore``, ``DragReorderController``: the editing
  core for programmatic use.

Examples
--------
>>> from proposal_builder import SectionStore
>>> SectionStore().section_ids
('cover', 'executive')
>>> from proposal_builder import app
>>> app.name[0]
'proposal'
"""

from __future__ import annotations

from .cli import app, main
from .dragdrop import DragReorderController
from .editor import EditorSession
from .store import SectionStore

__all__ = ["DragReorderController", "EditorSession", "SectionStore", "app", "main"]
