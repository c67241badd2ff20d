"""src/urlcraft/http/headers.py

Case-insensitive HTTP header mapping for urlcraft responses.
"""

from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
    cast,
)

__all__ = ["Headers"]


class Headers(Mapping[str, str]):
    """
    Read-only, case-insensitive mapping of response headers.

    A header may carry several values. Lookups join them with commas,
    except ``Set-Cookie`` which yields the first one. ``get_all`` returns
    the raw list.
    """

    __slots__ = ("_headers",)

    def __init__(self, headers: Optional[Mapping[str, Union[str, List[str]]]] = None):
        self._headers: Dict[str, List[str]] = {}
        if headers:
            for name, value in headers.items():
                values = value if isinstance(value, list) else [value]
                self._headers.setdefault(name.lower(), []).extend(values)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "Headers":
        """Build from ``(name, value)`` pairs, keeping repeated names."""
        headers = cls()
        for name, value in pairs:
            headers._headers.setdefault(name.lower(), []).append(value)
        return headers

    def __getitem__(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return cast(str, value)

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._headers

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a header value (name is case-insensitive), or ``default``.
        """
        values = self._headers.get(key.lower())
        if not values:
            return default

        if key.lower() == "set-cookie":
            return values[0]

        return ", ".join(values)

    def get_all(self, key: str) -> List[str]:
        """Get every value of a header, empty list if absent."""
        return list(self._headers.get(key.lower(), []))

    def __repr__(self) -> str:
        return f"Headers({self._headers!r})"
