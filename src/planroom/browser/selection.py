"""Selection of file identifiers within the visible listing."""

from __future__ import annotations

from typing import Iterable, Iterator


class SelectionManager:
    """Track selected file ids.

    Selection is never persisted. "Select all" only ever touches the ids the
    caller passes as visible, so out-of-scope files cannot be selected in bulk.
    """

    def __init__(self) -> None:
        self._ids: set[str] = set()

    def __contains__(self, file_id: object) -> bool:
        return file_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def has(self, file_id: str) -> bool:
        return file_id in self._ids

    def toggle(self, file_id: str) -> bool:
        """Flip ``file_id`` and return whether it is now selected."""

        if file_id in self._ids:
            self._ids.discard(file_id)
            return False
        self._ids.add(file_id)
        return True

    def set(self, file_id: str, selected: bool) -> None:
        if selected:
            self._ids.add(file_id)
        else:
            self._ids.discard(file_id)

    def set_many(self, file_ids: Iterable[str], selected: bool) -> None:
        for file_id in file_ids:
            self.set(file_id, selected)

    def select_all_visible(self, visible_ids: Iterable[str], selected: bool = True) -> None:
        self.set_many(visible_ids, selected)

    def clear(self) -> None:
        self._ids.clear()

    def selected_visible_count(self, visible_ids: Iterable[str]) -> int:
        """Return how many visible ids are selected."""

        return sum(1 for file_id in set(visible_ids) if file_id in self._ids)

    def all_visible_selected(self, visible_ids: Iterable[str]) -> bool:
        visible = set(visible_ids)
        return bool(visible) and visible <= self._ids


__all__ = ["SelectionManager"]
