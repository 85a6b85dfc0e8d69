"""src/courier/http/headers.py

Robust HTTP header management for Courier.
"""

from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Tuple,
    Union,
    cast,
)

HeaderInput = Union[Mapping[str, Union[str, List[str]]], Iterable[Tuple[str, str]]]


class Headers(MutableMapping[str, str]):
    """
    Case-insensitive, insertion-ordered dictionary for HTTP headers.

    Assignment replaces every value stored under a name, so a repeated
    ``headers["X"] = ...`` overwrites. ``add()`` appends instead, which is
    how parsed responses keep repeated fields such as Set-Cookie.
    Reading a name with several values joins them by commas (except
    Set-Cookie). Access raw lists via get_all().

    The first spelling used for a name is kept for serialization.
    """

    __slots__ = ("_headers",)

    def __init__(self, headers: Optional[HeaderInput] = None):
        self._headers: Dict[str, Tuple[str, List[str]]] = {}
        if headers:
            items = headers.items() if isinstance(headers, Mapping) else headers
            for k, v in items:
                # Support both single values and lists
                if isinstance(v, list):
                    for item in v:
                        self.add(k, item)
                else:
                    self.add(k, v)

    def __getitem__(self, key: str) -> str:
        """Get header value (comma-joined if multiple, except Set-Cookie)."""
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return cast(str, value)

    def __setitem__(self, key: str, value: str) -> None:
        lowered = key.lower()
        name = self._headers[lowered][0] if lowered in self._headers else key
        self._headers[lowered] = (name, [value])

    def __delitem__(self, key: str) -> None:
        del self._headers[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._headers

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._headers.values())

    def __len__(self) -> int:
        return len(self._headers)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._lowered() == other._lowered()
        if isinstance(other, Mapping):
            return self._lowered() == Headers(other)._lowered()
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"

    def _lowered(self) -> Dict[str, List[str]]:
        return {k: v for k, (_, v) in self._headers.items()}

    def add(self, key: str, value: str) -> None:
        """Append a value under ``key`` without dropping existing ones."""
        lowered = key.lower()
        if lowered in self._headers:
            self._headers[lowered][1].append(value)
        else:
            self._headers[lowered] = (key, [value])

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get header value.

        Args:
            key: Header name (case-insensitive).
            default: Default value if header not found.

        Returns:
            Comma-joined string for multiple values (except Set-Cookie
            which returns first), or default if not found.
        """
        entry = self._headers.get(key.lower())
        if not entry or not entry[1]:
            return default

        if key.lower() == "set-cookie":
            return entry[1][0]

        return ", ".join(entry[1])

    def get_all(self, key: str) -> List[str]:
        """
        Get all values of a header.

        Args:
            key: Header name (case-insensitive).

        Returns:
            List of all values for the header, empty list if not found.
        """
        entry = self._headers.get(key.lower())
        return list(entry[1]) if entry else []

    def multi_items(self) -> Iterator[Tuple[str, str]]:
        """Yield ``(name, value)`` once per stored value, in insertion order."""
        for name, values in self._headers.values():
            for value in values:
                yield name, value

    def copy(self) -> "Headers":
        """Return an independent copy."""
        return Headers(list(self.multi_items()))
