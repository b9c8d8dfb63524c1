"""
Union variant registry

Answers "is this type a union, and which variants does it declare?". The
answer is derived from the marker every time it is asked; nothing is cached,
so a check and a later fix always see the current declaration.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .logger import logger
from .symbols import TypeIdentity, TypeResolver


@dataclass(frozen=True)
class VariantSet:
    """Ordered, duplicate-free variants declared by a union marker"""
    union: TypeIdentity
    variants: Tuple[TypeIdentity, ...]

    def __iter__(self) -> Iterator[TypeIdentity]:
        return iter(self.variants)

    def __len__(self) -> int:
        return len(self.variants)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.variants)


def _contains(types: List[TypeIdentity], candidate: TypeIdentity, resolver: TypeResolver) -> bool:
    return any(resolver.type_identity_eq(candidate, t) for t in types)


def union_info(type_id: Optional[TypeIdentity], resolver: TypeResolver) -> Optional[VariantSet]:
    """Return the VariantSet of type_id, or None if it is not a union.

    Unresolved entries and duplicates in the marker are dropped silently. A
    marker left with no usable entries does not make a union.
    """
    if type_id is None:
        return None

    raw = resolver.get_marker_types(type_id)
    if raw is None:
        return None

    variants: List[TypeIdentity] = []
    for entry in raw:
        if entry is None:
            continue
        if _contains(variants, entry, resolver):
            continue
        variants.append(entry)

    if not variants:
        logger.debug("Union marker has no resolvable variants", union=type_id)
        return None
    return VariantSet(type_id, tuple(variants))
