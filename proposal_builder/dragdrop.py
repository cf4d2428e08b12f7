"""Translate drag gestures on the canvas into section reorders.

The canvas only shows visible sections, while the store orders the full
section array (hidden ones included). :class:`DragReorderController` runs one
gesture at a time through a small state machine::

    IDLE --start--> DRAGGING --drop (slot changed)--> COMMITTED --> IDLE
                        |    --drop (same slot)----> CANCELLED --> IDLE
                        |    --cancel--------------> CANCELLED --> IDLE
                        +--move / move_by--> DRAGGING

While dragging, only a transient preview order changes. The store is touched
once, on a committed drop, with both positions translated from visible-list
slots to full-array indices.

Locked sections are never dragged and never used as drop targets. They also
act as fixed points. A dragged section may only land inside the run of
unlocked sections (in the full array) that contains it, so the single
array-move performed on commit can never shift a locked section.

Drop targets are picked by closest centre. When the dragged centre sits
exactly between two slots, the slot further along the direction of travel
wins, so the same gesture always gives the same result.

Example
-------
>>> from proposal_builder.store import SectionStore
>>> from proposal_builder.dragdrop import DragReorderController
>>> store = SectionStore()
>>> controller = DragReorderController(store)
>>> controller.start("cover")
True
>>> controller.move_by(1)
1
>>> controller.drop().state
<DragState.COMMITTED: 'committed'>
>>> store.section_ids
('executive', 'cover')
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import typing as typ

if typ.TYPE_CHECKING:
    from .document import Section
    from .store import SectionStore

logger = logging.getLogger(__name__)

# Distances closer than this count as a tie.
_TIE_TOLERANCE = 1e-9


class DragState(enum.StrEnum):
    """Lifecycle of a single drag gesture."""

    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


@dc.dataclass(slots=True, frozen=True)
class SlotRect:
    """Vertical extent of one visible section on the canvas."""

    top: float
    height: float

    @property
    def center(self) -> float:
        return self.top + self.height / 2


@dc.dataclass(slots=True, frozen=True)
class DragOutcome:
    """Result of a finished gesture.

    Attributes
    ----------
    state : DragState
        ``COMMITTED`` when the store was reordered, ``CANCELLED`` otherwise.
    section_id : str | None
        Id of the dragged section.
    from_index : int | None
        Full-array index before the move (committed gestures only).
    to_index : int | None
        Full-array index after the move (committed gestures only).
    """

    state: DragState
    section_id: str | None = None
    from_index: int | None = None
    to_index: int | None = None


@dc.dataclass(slots=True)
class _Gesture:
    section_id: str
    visible_ids: tuple[str, ...]
    rects: tuple[SlotRect, ...]
    candidates: tuple[int, ...]
    start_slot: int
    target_slot: int
    delta: float = 0.0


def _default_rects(count: int) -> tuple[SlotRect, ...]:
    return tuple(SlotRect(top=float(index), height=1.0) for index in range(count))


def _segment_bounds(sections: typ.Sequence[Section], index: int) -> tuple[int, int]:
    """Return the exclusive bounds of the lock-free run containing ``index``."""
    lower = index - 1
    while lower >= 0 and not sections[lower].is_locked:
        lower -= 1
    upper = index + 1
    while upper < len(sections) and not sections[upper].is_locked:
        upper += 1
    return lower, upper


class DragReorderController:
    """Drive section reorders from pointer and keyboard drag gestures."""

    def __init__(self, store: SectionStore) -> None:
        """Bind the controller to the store it reorders."""
        self._store = store
        self._geometry: tuple[SlotRect, ...] | None = None
        self._gesture: _Gesture | None = None
        self.last_outcome: DragOutcome | None = None

    @property
    def state(self) -> DragState:
        """Return ``DRAGGING`` during a gesture and ``IDLE`` otherwise."""
        return DragState.DRAGGING if self._gesture else DragState.IDLE

    @property
    def dragged_id(self) -> str | None:
        return self._gesture.section_id if self._gesture else None

    @property
    def target_slot(self) -> int | None:
        """Return the visible-list slot the dragged section would drop into."""
        return self._gesture.target_slot if self._gesture else None

    @property
    def preview_order(self) -> tuple[str, ...]:
        """Return visible section ids in the order shown while dragging.

        Outside a gesture this is the store's visible order.
        """
        gesture = self._gesture
        if gesture is None:
            return tuple(section.id for section in self._store.visible_sections())
        order = list(gesture.visible_ids)
        moved = order.pop(gesture.start_slot)
        order.insert(gesture.target_slot, moved)
        return tuple(order)

    def set_geometry(self, rects: typ.Sequence[SlotRect] | None) -> None:
        """Record measured slot rectangles for the visible sections.

        ``None`` (or a list whose length does not match the visible sections
        when a gesture starts) falls back to unit-high slots stacked top to
        bottom.
        """
        self._geometry = tuple(rects) if rects is not None else None

    def candidate_slots(self, section_id: str) -> tuple[int, ...]:
        """Return the visible slots ``section_id`` may be dropped into.

        The result is empty when the section is unknown, hidden, or locked.
        """
        sections = self._store.sections
        full_index = self._store.index_of(section_id)
        if full_index is None:
            return ()
        section = sections[full_index]
        if section.is_locked or not section.is_visible:
            return ()
        lower, upper = _segment_bounds(sections, full_index)
        slots: list[int] = []
        slot = 0
        for index, candidate in enumerate(sections):
            if not candidate.is_visible:
                continue
            if lower < index < upper:
                slots.append(slot)
            slot += 1
        return tuple(slots)

    def start(self, section_id: str) -> bool:
        """Begin dragging ``section_id``.

        Returns
        -------
        bool
            ``True`` when a gesture started. A second start while dragging,
            and attempts to drag locked, hidden, or unknown sections, are
            ignored and return ``False``.
        """
        if self._gesture is not None:
            logger.debug(
                "ignoring drag of %r while %r is being dragged",
                section_id,
                self._gesture.section_id,
            )
            return False
        candidates = self.candidate_slots(section_id)
        if not candidates:
            logger.debug("section %r cannot be dragged", section_id)
            return False
        visible_ids = tuple(section.id for section in self._store.visible_sections())
        rects = self._geometry
        if rects is None or len(rects) != len(visible_ids):
            rects = _default_rects(len(visible_ids))
        start_slot = visible_ids.index(section_id)
        self._gesture = _Gesture(
            section_id=section_id,
            visible_ids=visible_ids,
            rects=rects,
            candidates=candidates,
            start_slot=start_slot,
            target_slot=start_slot,
        )
        return True

    def move(self, delta_y: float) -> int | None:
        """Handle a pointer move of ``delta_y`` from the drag origin.

        The dragged centre is the start slot's centre shifted by ``delta_y``;
        the nearest candidate centre becomes the drop target.

        Returns
        -------
        int | None
            The target visible slot, or ``None`` when no gesture is active.
        """
        gesture = self._gesture
        if gesture is None:
            return None
        gesture.delta = delta_y
        dragged_center = gesture.rects[gesture.start_slot].center + delta_y
        best_slot: int | None = None
        best_distance = 0.0
        for slot in gesture.candidates:
            distance = abs(gesture.rects[slot].center - dragged_center)
            if best_slot is None or distance < best_distance - _TIE_TOLERANCE:
                best_slot, best_distance = slot, distance
            elif abs(distance - best_distance) <= _TIE_TOLERANCE:
                forward = slot > best_slot if delta_y > 0 else slot < best_slot
                if delta_y != 0 and forward:
                    best_slot = slot
        if best_slot is not None:
            gesture.target_slot = best_slot
        return gesture.target_slot

    def move_by(self, steps: int) -> int | None:
        """Handle a keyboard move of ``steps`` candidate slots (negative is up).

        Movement clamps at the first and last candidate slot.
        """
        gesture = self._gesture
        if gesture is None:
            return None
        position = gesture.candidates.index(gesture.target_slot)
        position = max(0, min(len(gesture.candidates) - 1, position + steps))
        gesture.target_slot = gesture.candidates[position]
        gesture.delta = (
            gesture.rects[gesture.target_slot].center
            - gesture.rects[gesture.start_slot].center
        )
        return gesture.target_slot

    def drop(self) -> DragOutcome:
        """Finish the gesture, reordering the store when the slot changed.

        The drop is checked against the store as it is now, not as it was when
        the gesture started. It is cancelled when the dragged section has been
        locked, hidden or removed meanwhile, or when the target is no longer
        inside the dragged section's lock-free segment.
        """
        gesture = self._gesture
        if gesture is None:
            return DragOutcome(state=DragState.CANCELLED)
        self._gesture = None
        cancelled = DragOutcome(DragState.CANCELLED, gesture.section_id)
        if gesture.target_slot == gesture.start_slot:
            return self._finish(cancelled)

        target_id = gesture.visible_ids[gesture.target_slot]
        visible_ids = tuple(section.id for section in self._store.visible_sections())
        candidates = self.candidate_slots(gesture.section_id)
        if (
            target_id not in visible_ids
            or visible_ids.index(target_id) not in candidates
        ):
            logger.debug(
                "drop of %r onto %r no longer allowed", gesture.section_id, target_id
            )
            return self._finish(cancelled)

        from_index = self._store.index_of(gesture.section_id)
        to_index = self._store.index_of(target_id)
        if from_index is None or to_index is None:  # pragma: no cover - guarded above
            return self._finish(cancelled)

        self._store.reorder(from_index, to_index)
        return self._finish(
            DragOutcome(
                state=DragState.COMMITTED,
                section_id=gesture.section_id,
                from_index=from_index,
                to_index=to_index,
            )
        )

    def cancel(self) -> DragOutcome:
        """Abandon the gesture without touching the store."""
        gesture = self._gesture
        self._gesture = None
        section_id = gesture.section_id if gesture else None
        return self._finish(DragOutcome(DragState.CANCELLED, section_id))

    def _finish(self, outcome: DragOutcome) -> DragOutcome:
        self.last_outcome = outcome
        return outcome


__all__ = ["DragOutcome", "DragReorderController", "DragState", "SlotRect"]
