from __future__ import annotations

from typing import Generic, Iterable, List, Optional, Tuple, TypeVar

from .errors import EmptyHistoryError

T = TypeVar('T')


class HistoryManager(Generic[T]):
    """Linear undo/redo over whole-state snapshots.

    Every value is stored as an independent ``copy()`` and handed back the
    same way, so history never aliases the caller's live state.
    """

    def __init__(self, undo: Optional[Iterable[T]] = None, redo: Optional[Iterable[T]] = None) -> None:
        self._undo: List[T] = [s.copy() for s in (undo or ())]  # type: ignore[attr-defined]
        self._redo: List[T] = [s.copy() for s in (redo or ())]  # type: ignore[attr-defined]

    def add(self, snapshot: T) -> None:
        """Records a new state; any previously undone future is dropped."""
        self._undo.append(snapshot.copy())  # type: ignore[attr-defined]
        self._redo.clear()

    def undo(self, current: T) -> T:
        if not self._undo:
            raise EmptyHistoryError("nothing to undo")
        previous = self._undo.pop()
        self._redo.append(current.copy())  # type: ignore[attr-defined]
        return previous

    def redo(self, current: T) -> T:
        if not self._redo:
            raise EmptyHistoryError("nothing to redo")
        following = self._redo.pop()
        self._undo.append(current.copy())  # type: ignore[attr-defined]
        return following

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    @property
    def undo_stack(self) -> Tuple[T, ...]:
        """Copies of the undo snapshots, oldest first."""
        return tuple(s.copy() for s in self._undo)  # type: ignore[attr-defined]

    @property
    def redo_stack(self) -> Tuple[T, ...]:
        """Copies of the redo snapshots, oldest first (the last one is restored next)."""
        return tuple(s.copy() for s in self._redo)  # type: ignore[attr-defined]

    def __len__(self) -> int:
        return len(self._undo)
