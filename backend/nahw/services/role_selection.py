"""Two-step role assignment for role-based constructions.

The learner first picks the governing element (verb or accusative particle)
and then the governed one (subject or ismuha):

    selection -> primary-selection -> secondary-selection -> complete

Each transition returns a new RoleSelection. Moving on from a step needs at
least one index picked in that step. `clear()` goes back to `selection` and
drops every assignment made so far.
"""

from dataclasses import dataclass, replace

SELECTION = "selection"
PRIMARY_SELECTION = "primary-selection"
SECONDARY_SELECTION = "secondary-selection"
COMPLETE = "complete"

STEPS = (SELECTION, PRIMARY_SELECTION, SECONDARY_SELECTION, COMPLETE)


class RoleSelectionError(ValueError):
    pass


def _toggle(indices: tuple[int, ...], index: int) -> tuple[int, ...]:
    if index in indices:
        return tuple(i for i in indices if i != index)
    return indices + (index,)


@dataclass(frozen=True)
class RoleSelection:
    step: str = SELECTION
    primary_indices: tuple[int, ...] = ()
    secondary_indices: tuple[int, ...] = ()

    def __post_init__(self):
        if self.step not in STEPS:
            raise RoleSelectionError(f"Unknown step: {self.step}")

    @property
    def is_complete(self) -> bool:
        return self.step == COMPLETE

    def begin(self) -> "RoleSelection":
        if self.step != SELECTION:
            raise RoleSelectionError(f"Cannot begin role assignment from {self.step}")
        return replace(self, step=PRIMARY_SELECTION)

    def toggle(self, index: int) -> "RoleSelection":
        """Add or remove a segment index for the role of the current step."""
        if self.step == PRIMARY_SELECTION:
            if index in self.secondary_indices:
                raise RoleSelectionError(f"Index {index} is already assigned the secondary role")
            return replace(self, primary_indices=_toggle(self.primary_indices, index))
        if self.step == SECONDARY_SELECTION:
            if index in self.primary_indices:
                raise RoleSelectionError(f"Index {index} is already assigned the primary role")
            return replace(self, secondary_indices=_toggle(self.secondary_indices, index))
        raise RoleSelectionError(f"No role is being selected in step {self.step}")

    def can_advance(self) -> bool:
        if self.step == PRIMARY_SELECTION:
            return bool(self.primary_indices)
        if self.step == SECONDARY_SELECTION:
            return bool(self.secondary_indices)
        return False

    def advance(self) -> "RoleSelection":
        if self.step == PRIMARY_SELECTION:
            if not self.primary_indices:
                raise RoleSelectionError("Select at least one word for the primary role first")
            return replace(self, step=SECONDARY_SELECTION)
        if self.step == SECONDARY_SELECTION:
            if not self.secondary_indices:
                raise RoleSelectionError("Select at least one word for the secondary role first")
            return replace(self, step=COMPLETE)
        raise RoleSelectionError(f"Cannot advance from {self.step}")

    def clear(self) -> "RoleSelection":
        return RoleSelection()
