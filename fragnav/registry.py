# fragnav/registry.py
from typing import Iterator, List, Optional, Tuple


class NavigationStack:
    """
    Ordered navigation history of container ids.

    Insertion order is recency of activation: the last id is the active
    container, every other id is hidden but keeps its content. An id appears
    at most once; re-activating it moves it to the end.
    """

    def __init__(self, ids=None):
        self._ids: List[str] = []
        for container_id in ids or ():
            self.push(container_id)

    def push(self, container_id: str) -> None:
        if container_id in self._ids:
            raise ValueError(f"'{container_id}' is already registered")
        self._ids.append(container_id)

    def promote(self, container_id: str) -> None:
        """Moves an already registered id to the most recent position."""
        self._ids.remove(container_id)
        self._ids.append(container_id)

    def pop(self) -> str:
        if not self._ids:
            raise IndexError("pop from an empty navigation stack")
        return self._ids.pop()

    @property
    def top(self) -> Optional[str]:
        return self._ids[-1] if self._ids else None

    def snapshot(self) -> Tuple[str, ...]:
        return tuple(self._ids)

    def restore(self, snapshot: Tuple[str, ...]) -> None:
        if len(set(snapshot)) != len(snapshot):
            raise ValueError("snapshot contains duplicate ids")
        self._ids = list(snapshot)

    def __contains__(self, container_id: object) -> bool:
        return container_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ids))

    def __repr__(self):
        return f"NavigationStack({self._ids!r})"
