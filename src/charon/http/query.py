"""Parsed query string parameters."""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class QueryParams(Mapping[str, str]):
    """Read-only, multi-valued query parameters.

    Blank values are kept (``?q=`` gives ``q == ""``). Indexing gives a
    name's first value; ``get_list`` and ``to_dict`` expose all of them,
    which is what a ``GET`` request's body map is built from.
    """

    __slots__ = ("_params", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        object.__setattr__(self, "_raw", query_string)
        object.__setattr__(
            self,
            "_params",
            parse_qs(query_string.decode("latin-1"), keep_blank_values=True),
        )

    def __getitem__(self, key: str) -> str:
        return self._params[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __repr__(self) -> str:
        return f"QueryParams({self._params!r})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        values = self._params.get(key)
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        return list(self._params.get(key, ()))

    def to_dict(self) -> dict[str, list[str]]:
        """A fresh ``{name: [values...]}`` copy of every parameter."""
        return {key: list(values) for key, values in self._params.items()}

    @property
    def raw(self) -> bytes:
        return self._raw
