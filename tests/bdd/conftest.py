"""Step definitions shared by the proposal editing scenarios."""

from __future__ import annotations

import typing as typ

from pytest_bdd import given, parsers, then

from proposal_builder.document import default_template
from proposal_builder.store import SectionStore

ScenarioState = dict[str, typ.Any]


def split_ids(raw: str) -> tuple[str, ...]:
    """Split a comma separated id list from a feature file."""
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@given("the default proposal template")
def given_default_template(scenario_state: ScenarioState) -> None:
    scenario_state["store"] = SectionStore(default_template())


@given(parsers.parse('a proposal with sections "{ids}"'))
def given_sections(
    scenario_state: ScenarioState,
    make_template: typ.Callable[..., typ.Any],
    ids: str,
) -> None:
    scenario_state["store"] = SectionStore(make_template(split_ids(ids)))


@given(parsers.parse('section "{section_id}" is hidden'))
def given_hidden(scenario_state: ScenarioState, section_id: str) -> None:
    store = typ.cast("SectionStore", scenario_state["store"])
    store.set_visibility(section_id, False)


@given(parsers.parse('section "{section_id}" is locked'))
def given_locked(scenario_state: ScenarioState, section_id: str) -> None:
    store = typ.cast("SectionStore", scenario_state["store"])
    store.set_locked(section_id, True)


@then(parsers.parse('the section order is "{ids}"'))
def then_section_order(scenario_state: ScenarioState, ids: str) -> None:
    store = typ.cast("SectionStore", scenario_state["store"])
    expected = split_ids(ids)
    assert store.section_ids == expected, (
        f"expected order {expected}, got {store.section_ids}"
    )
