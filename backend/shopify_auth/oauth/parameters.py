"""
Typed access to OAuth2 additional parameters.

Authorization requests and token responses carry integration-specific
values next to the standard OAuth2 fields. Well-known entries are read and
written through ParameterKey so the value type travels with the key;
unknown entries are preserved untouched.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Generic, Iterator, Mapping, Optional, Type, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ParameterKey(Generic[T]):
    """Name and expected value type of an additional parameter."""
    name: str
    value_type: Type[T]


# The shop domain travels under this key from the authorization request
# to the token response.
SHOP_PARAMETER: ParameterKey[str] = ParameterKey("shop", str)


class AdditionalParameters(Mapping[str, Any]):
    """
    Immutable bag of additional parameters.

    Behaves as a read-only mapping for forward compatibility with fields
    this package does not know about.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values = MappingProxyType(dict(values or {}))

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._values) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def __repr__(self) -> str:
        return f"AdditionalParameters({dict(self._values)!r})"

    def value(self, key: ParameterKey[T]) -> Optional[T]:
        """
        Return the value stored under key, or None when absent.

        Raises:
            TypeError: If the stored value is not of the key's type
        """
        raw = self._values.get(key.name)
        if raw is None:
            return None
        if not isinstance(raw, key.value_type):
            raise TypeError(
                f"Parameter '{key.name}' expected {key.value_type.__name__}, "
                f"got {type(raw).__name__}"
            )
        return raw

    def with_value(self, key: ParameterKey[T], value: T) -> "AdditionalParameters":
        """Return a copy with key set to value, replacing any existing entry."""
        if not isinstance(value, key.value_type):
            raise TypeError(
                f"Parameter '{key.name}' expected {key.value_type.__name__}, "
                f"got {type(value).__name__}"
            )
        merged = dict(self._values)
        merged[key.name] = value
        return AdditionalParameters(merged)
