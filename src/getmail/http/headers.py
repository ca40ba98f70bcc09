"""Immutable, case-insensitive HTTP headers.

Implements ``Mapping[str, str]``. Names are lower-cased and values
decoded once, when the headers are built from the ASGI scope.
"""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header.
    ``replace`` returns a copy with one header overridden, which is how
    forwarded requests swap their ``Content-Type``.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[tuple[str, str]] = ()) -> None:
        object.__setattr__(
            self, "_items", tuple((name.lower(), value) for name, value in items)
        )

    @classmethod
    def from_raw(cls, raw: Iterable[tuple[bytes, bytes]]) -> Headers:
        """Build from ASGI ``(name, value)`` byte pairs."""
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)

    def __getitem__(self, key: str) -> str:
        wanted = key.lower()
        for name, value in self._items:
            if name == wanted:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._items))

    def __len__(self) -> int:
        return len(dict.fromkeys(name for name, _ in self._items))

    def __repr__(self) -> str:
        return f"Headers({dict(self)!r})"

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        wanted = key.lower()
        return [value for name, value in self._items if name == wanted]

    def replace(self, key: str, value: str) -> Headers:
        """Return new headers with every *key* entry replaced by one *value*."""
        wanted = key.lower()
        kept = [(name, v) for name, v in self._items if name != wanted]
        return Headers([*kept, (wanted, value)])

