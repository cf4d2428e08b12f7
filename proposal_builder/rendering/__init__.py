"""Utilities for sanitizing and rendering proposal templates to HTML."""

from .models import CanvasView, SectionView
from .renderer import ProposalPageBuilder, ProposalRenderer
from .sanitizer import sanitize_html

__all__ = [
    "CanvasView",
    "ProposalPageBuilder",
    "ProposalRenderer",
    "SectionView",
    "sanitize_html",
]
