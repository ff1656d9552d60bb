"""
Undo history: round-trips and the snapshot bound.
"""

import pytest

from bifurcation.core.config import EngineConfig
from bifurcation.core.history import GameSnapshot, MoveHistory
from bifurcation.core.types import Position

CORRIDOR = ["#####", "#P  #", "#####"]

L1_P1_SOLUTION = ["down", "up", "right", "right", "right", "right", "down"]


class TestUndoRoundTrip:
    """N moves followed by N undos restore the starting snapshot."""

    def test_round_trip_restores_everything(self, l1_p1_state):
        before = l1_p1_state.snapshot()

        for direction in L1_P1_SOLUTION:
            assert l1_p1_state.try_move(direction).ok
        assert l1_p1_state.is_solved()

        for _ in L1_P1_SOLUTION:
            assert l1_p1_state.undo()

        assert l1_p1_state.snapshot() == before
        assert not l1_p1_state.undo()

    def test_undo_restores_door_state(self, l1_p1_state):
        door = Position(4, 2)
        l1_p1_state.try_move("down")
        assert not l1_p1_state.is_door_blocking(0, door)

        l1_p1_state.undo()

        assert l1_p1_state.is_door_blocking(0, door)
        assert l1_p1_state.get_active_branch().player.position == Position(2, 1)

    def test_undo_restores_active_branch(self, make_state):
        state = make_state(CORRIDOR, layer=2)
        state.try_move("right")
        state.switch_branch(1)
        state.try_move("right")

        state.undo()

        assert state.active_branch == 1
        assert state.branches[1].player.position == Position(1, 1)
        assert state.branches[0].player.position == Position(2, 1)

    def test_undo_on_fresh_state_fails(self, make_state):
        state = make_state(CORRIDOR)

        assert not state.undo()
        assert state.moves == 0


class TestHistoryBound:
    """The history keeps only the most recent snapshots."""

    def test_sixty_moves_fifty_undos(self, make_state):
        state = make_state(CORRIDOR)
        for step in range(60):
            assert state.try_move("right" if step % 2 == 0 else "left").ok

        assert state.moves == 60
        assert len(state.history) == 50

        for _ in range(50):
            assert state.undo()

        assert state.moves == 10
        frozen = state.snapshot()

        assert not state.undo()
        assert state.snapshot() == frozen

    def test_configured_bound(self, make_state):
        state = make_state(CORRIDOR, config=EngineConfig(max_history=3))
        for step in range(5):
            state.try_move("right" if step % 2 == 0 else "left")

        undone = 0
        while state.undo():
            undone += 1

        assert undone == 3
        assert state.moves == 2


class TestMoveHistory:
    """Unit tests for the bounded stack."""

    def _snapshot(self, moves: int) -> GameSnapshot:
        return GameSnapshot(branches=[], active_branch=0, moves=moves, pushes=0)

    def test_drops_oldest(self):
        history = MoveHistory(max_entries=2)
        for moves in range(3):
            history.push(self._snapshot(moves))

        assert len(history) == 2
        assert history.peek().moves == 2
        assert history.pop().moves == 2
        assert history.pop().moves == 1
        assert history.pop() is None
        assert not history

    def test_clear(self):
        history = MoveHistory()
        history.push(self._snapshot(1))
        history.clear()

        assert len(history) == 0
        assert history.peek() is None

    def test_rejects_zero_capacity(self):
        with pytest.raises(ValueError):
            MoveHistory(max_entries=0)
