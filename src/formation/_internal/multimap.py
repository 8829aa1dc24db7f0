"""MultiValueMapping protocol — the shape ``Form.process()`` reads lists from.

A structural protocol so any request container exposing ``get_list`` can
be scoped without coupling to ``FormData``.
"""

from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MultiValueMapping(Protocol):
    """A read-only mapping where keys can have multiple values.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    def __getitem__(self, key: str) -> Any: ...
    def __contains__(self, key: object) -> bool: ...
    def __iter__(self) -> Iterator[str]: ...
    def __len__(self) -> int: ...
    def get_list(self, key: str) -> list[Any]: ...
