"""
Insertion-ordered set keyed by an explicit identity function.

Two identities are in use across the package and must stay distinct:

- the full commit SHA, used when merging commit lists across branches;
- the 7-character display hash, used when de-duplicating report output.

The short hash can in theory collide between different commits; callers that
key on it accept that risk for display purposes only.
"""

from typing import Callable, Dict, Generic, Hashable, Iterable, Iterator, List, TypeVar

T = TypeVar("T")


class OrderedKeySet(Generic[T]):
    """Keeps the first item seen for each key, in insertion order."""

    def __init__(self, key: Callable[[T], Hashable], items: Iterable[T] = ()) -> None:
        self._key = key
        self._items: Dict[Hashable, T] = {}
        self.extend(items)

    def add(self, item: T) -> bool:
        """Add ``item`` unless its key is already present. Returns True if added."""
        k = self._key(item)
        if k in self._items:
            return False
        self._items[k] = item
        return True

    def extend(self, items: Iterable[T]) -> int:
        added = 0
        for item in items:
            if self.add(item):
                added += 1
        return added

    def __contains__(self, item: object) -> bool:
        return self._key(item) in self._items  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[T]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def to_list(self) -> List[T]:
        return list(self._items.values())
