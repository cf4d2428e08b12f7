"""Shared fixtures for the proposal_builder test suite."""

from __future__ import annotations

import typing as typ

import pytest

from proposal_builder.document import Section, Template


def build_template(ids: typ.Iterable[str], **section_flags: typ.Any) -> Template:
    """Return a template holding plain ``custom`` sections with ``ids``."""
    return Template(
        id="tpl-1",
        name="Test Proposal",
        sections=tuple(
            Section(
                id=section_id,
                kind="custom",
                title=section_id.upper(),
                content=f"<p>{section_id}</p>",
                **section_flags,
            )
            for section_id in ids
        ),
    )


@pytest.fixture
def make_template() -> typ.Callable[..., Template]:
    """Return the :func:`build_template` factory."""
    return build_template


@pytest.fixture
def scenario_state() -> dict[str, typ.Any]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}
