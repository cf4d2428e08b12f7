"""Common literal values used across proposal_builder.

Section kinds, placeholder copy, and style-panel ranges live here so the
store, renderer, CLI, and tests import the same values.

Examples
--------
>>> from proposal_builder import _constants
>>> _constants.NEW_SECTION_CONTENT.format(title="PRICING")
'<h3>PRICING</h3><p>Add your content here...</p>'
>>> _constants.STYLE_RANGES["font_size"]
(8, 72, 1)
"""

SECTION_KINDS = (
    "cover_page",
    "executive_summary",
    "company_intro",
    "solution_overview",
    "pricing",
    "terms",
    "custom",
)

NEW_SECTION_CONTENT = "<h3>{title}</h3><p>Add your content here...</p>"
EDIT_PLACEHOLDER = "<h3>{title}</h3><p>Double-click to edit content...</p>"
NEW_SECTION_FONT_SIZE = 16
NEW_SECTION_WIDTH = "100%"

# (minimum, maximum, step) of the style panel sliders, in pixels.
STYLE_RANGES: dict[str, tuple[int, int, int]] = {
    "font_size": (8, 72, 1),
    "padding": (0, 80, 4),
    "margin": (0, 40, 4),
}

# A4 width at 96dpi.
CANVAS_WIDTH_PX = 794
