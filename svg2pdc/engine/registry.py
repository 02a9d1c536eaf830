"""Normalizer registry: every element kind is turned into segments by one registered function.

Usage:
    @normalizer(RectElement, fillable=True, description="rect → closed 4-line path")
    def normalize_rect(element: RectElement) -> list[Segment]:
        ...

Supporting a new shape = writing one function with the decorator. The
converter looks normalizers up by element type.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from svg2pdc.engine.segments import Segment
    from svg2pdc.svg.document import Drawable

logger = logging.getLogger(__name__)


@dataclass
class NormalizerSpec:
    element_type: type
    fn: Callable[..., list["Segment"]]
    # Lines are never filled
    fillable: bool = True
    # fn takes a max_error keyword bounding its curve approximation
    bounded_error: bool = False
    description: str = ""

    @property
    def name(self) -> str:
        return self.element_type.__name__


class NormalizerRegistry:
    """Registry of shape normalizers keyed by element type."""

    def __init__(self) -> None:
        self._normalizers: dict[type, NormalizerSpec] = {}

    def register(self, spec: NormalizerSpec) -> None:
        if spec.element_type in self._normalizers:
            raise ValueError(f"Duplicate normalizer for: {spec.name}")
        self._normalizers[spec.element_type] = spec
        logger.debug("Registered normalizer %s", spec.name)

    def get(self, element_type: type) -> NormalizerSpec | None:
        return self._normalizers.get(element_type)

    def all(self) -> list[NormalizerSpec]:
        return sorted(self._normalizers.values(), key=lambda s: s.name)

    @property
    def count(self) -> int:
        return len(self._normalizers)


# Module-level singleton
_registry = NormalizerRegistry()


def get_registry() -> NormalizerRegistry:
    return _registry


def normalizer(
    element_type: type,
    *,
    fillable: bool = True,
    bounded_error: bool = False,
    description: str = "",
):
    """Decorator to register a shape normalizer."""

    def decorator(fn: Callable[..., list["Segment"]]):
        _registry.register(
            NormalizerSpec(
                element_type=element_type,
                fn=fn,
                fillable=fillable,
                bounded_error=bounded_error,
                description=description,
            )
        )
        return fn

    return decorator
