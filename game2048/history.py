from game2048.game_state import GameState, Snapshot


class HistoryStack:
    """
    Undo stack of pre-move snapshots, oldest first.

    A snapshot is pushed before every attempted move and dropped again when the
    move turns out to be a no-op, so only effective moves can be undone.
    """

    def __init__(self, snapshots=()):
        self._snapshots = list(snapshots)

    @classmethod
    def from_snapshots(cls, snapshots):
        return cls(snapshots)

    def before_move(self, state: GameState) -> Snapshot:
        snapshot = state.snapshot()
        self._snapshots.append(snapshot)
        return snapshot

    def discard_if_noop(self, moved: bool) -> None:
        if not moved and self._snapshots:
            self._snapshots.pop()

    def undo(self, state: GameState) -> bool:
        """Restore `state` from the latest snapshot. Returns False if there is nothing to undo."""
        if not self._snapshots:
            return False
        state.restore(self._snapshots.pop())
        return True

    def can_undo(self) -> bool:
        return bool(self._snapshots)

    def clear(self) -> None:
        self._snapshots = []

    def copy(self):
        return HistoryStack(self._snapshots)

    def __len__(self):
        return len(self._snapshots)

    def __iter__(self):
        return iter(self._snapshots)

    def __eq__(self, other):
        if not isinstance(other, HistoryStack):
            return NotImplemented
        return self._snapshots == other._snapshots

    def __repr__(self):
        return f"HistoryStack({len(self._snapshots)} snapshots)"
