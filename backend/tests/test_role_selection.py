import pytest

from nahw.services.role_selection import (
    COMPLETE,
    PRIMARY_SELECTION,
    SECONDARY_SELECTION,
    SELECTION,
    RoleSelection,
    RoleSelectionError,
)


def _completed(primary=(0,), secondary=(1,)):
    s = RoleSelection().begin()
    for i in primary:
        s = s.toggle(i)
    s = s.advance()
    for i in secondary:
        s = s.toggle(i)
    return s.advance()


class TestRoleSelection:
    def test_full_walk(self):
        s = RoleSelection()
        assert s.step == SELECTION
        s = s.begin()
        assert s.step == PRIMARY_SELECTION
        s = s.toggle(0)
        assert s.can_advance()
        s = s.advance()
        assert s.step == SECONDARY_SELECTION
        assert not s.can_advance()
        s = s.toggle(1).advance()
        assert s.step == COMPLETE
        assert s.is_complete
        assert s.primary_indices == (0,)
        assert s.secondary_indices == (1,)

    def test_transitions_return_new_objects(self):
        start = RoleSelection().begin()
        toggled = start.toggle(3)
        assert start.primary_indices == ()
        assert toggled.primary_indices == (3,)

    def test_toggle_removes(self):
        s = RoleSelection().begin().toggle(2).toggle(5).toggle(2)
        assert s.primary_indices == (5,)

    def test_cannot_advance_without_primary(self):
        s = RoleSelection().begin()
        assert not s.can_advance()
        with pytest.raises(RoleSelectionError):
            s.advance()

    def test_cannot_advance_without_secondary(self):
        s = RoleSelection().begin().toggle(0).advance()
        with pytest.raises(RoleSelectionError):
            s.advance()

    def test_roles_are_disjoint(self):
        s = RoleSelection().begin().toggle(0).advance()
        with pytest.raises(RoleSelectionError):
            s.toggle(0)

    def test_no_toggle_outside_role_steps(self):
        with pytest.raises(RoleSelectionError):
            RoleSelection().toggle(0)
        with pytest.raises(RoleSelectionError):
            _completed().toggle(4)

    def test_no_advance_from_complete(self):
        with pytest.raises(RoleSelectionError):
            _completed().advance()

    def test_begin_only_from_selection(self):
        with pytest.raises(RoleSelectionError):
            RoleSelection().begin().begin()

    def test_clear_resets_everything(self):
        cleared = _completed(primary=(0, 1), secondary=(2,)).clear()
        assert cleared == RoleSelection()
        assert cleared.step == SELECTION
        assert cleared.primary_indices == ()
        assert cleared.secondary_indices == ()

    def test_unknown_step(self):
        with pytest.raises(RoleSelectionError):
            RoleSelection(step="done")
