"""Proposal template document model.

This subpackage holds the immutable dataclasses describing a proposal
(:class:`Template`, :class:`Section`, :class:`StyleOverrides` ...), the loader
that turns a template YAML file into those dataclasses, and the serializers
that write YAML files and REST payloads back out. When no template is
supplied, :func:`default_template` provides the two-section starting point.

Examples
--------
>>> from pathlib import Path
>>> from proposal_builder.document import load_template
>>> template = load_template(Path("proposals/acme.yaml"))  # doctest: +SKIP
>>> template.section_ids  # doctest: +SKIP
('cover', 'executive', 'pricing')
"""

from .loader import (
    DEFAULT_TEMPLATE_ID,
    default_template,
    load_template,
    template_from_mapping,
)
from .models import (
    GlobalStyling,
    PageMargins,
    Section,
    SectionLayout,
    StyleOverrides,
    Template,
    TemplateError,
)
from .serializer import (
    save_template,
    template_from_payload,
    template_to_mapping,
    template_to_payload,
)

__all__ = [
    "DEFAULT_TEMPLATE_ID",
    "GlobalStyling",
    "PageMargins",
    "Section",
    "SectionLayout",
    "StyleOverrides",
    "Template",
    "TemplateError",
    "default_template",
    "load_template",
    "save_template",
    "template_from_mapping",
    "template_from_payload",
    "template_to_mapping",
    "template_to_payload",
]
