# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Immutable field store shared by chained sink instances.

Each ``derive`` call appends one read-only layer instead of copying the
whole mapping. Lookups search the newest layer first, so a later
contribution shadows an earlier value for the same key. Chains deeper
than ``MAX_LAYERS`` are compacted into a single layer.
"""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any

MAX_LAYERS = 16

FieldsLike = Mapping[str, Any] | Iterable[tuple[str, Any]]


def _encode(value: Any) -> Any:
    # Errors are recorded by their message
    if isinstance(value, BaseException):
        return str(value)
    return value


def _collect(fields: "FieldsLike | None") -> dict[str, Any]:
    if not fields:
        return {}
    items = fields.items() if isinstance(fields, Mapping) else fields
    collected: dict[str, Any] = {}
    for key, value in items:
        collected[str(key)] = _encode(value)
    return collected


class FieldStore(Mapping[str, Any]):
    """Read-only mapping from field name to value."""

    __slots__ = ("_layers",)

    def __init__(self, fields: "FieldsLike | None" = None):
        collected = _collect(fields)
        self._layers: tuple[Mapping[str, Any], ...] = (
            (MappingProxyType(collected),) if collected else ()
        )

    @classmethod
    def _from_layers(cls, layers: tuple[Mapping[str, Any], ...]) -> "FieldStore":
        store = cls.__new__(cls)
        store._layers = layers
        return store

    def derive(self, fields: "FieldsLike | None") -> "FieldStore":
        """Return a new store with ``fields`` added on top of this one.

        This store is left untouched. On a key collision the new value
        wins; within ``fields`` the last occurrence of a key wins.

        Args:
            fields: Mapping or iterable of (key, value) pairs

        Returns:
            A new FieldStore, or this store when ``fields`` is empty
        """
        collected = _collect(fields)
        if not collected:
            return self

        layers = self._layers + (MappingProxyType(collected),)
        if len(layers) > MAX_LAYERS:
            layers = (MappingProxyType(self._flatten(layers)),)
        return self._from_layers(layers)

    @staticmethod
    def _flatten(layers: tuple[Mapping[str, Any], ...]) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        for layer in layers:
            merged.update(layer)
        return merged

    def as_dict(self) -> dict[str, Any]:
        """Return a new plain dict snapshot of the store."""
        return self._flatten(self._layers)

    @property
    def depth(self) -> int:
        return len(self._layers)

    def __getitem__(self, key: str) -> Any:
        for layer in reversed(self._layers):
            if key in layer:
                return layer[key]
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.as_dict())

    def __len__(self) -> int:
        return len(self.as_dict())

    def __contains__(self, key: object) -> bool:
        return any(key in layer for layer in self._layers)

    def __repr__(self) -> str:
        return f"FieldStore({self.as_dict()!r})"


EMPTY = FieldStore()


def derive(base: FieldStore, fields: "FieldsLike | None") -> FieldStore:
    """Merge ``fields`` into ``base`` without modifying ``base``."""
    return base.derive(fields)
