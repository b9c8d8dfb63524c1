"""
Runtime union marker

The ``@union`` decorator declares a class as a closed union of variant types:

    @union("Circle", "Square")
    class Shape(Protocol):
        ...

    class Circle(Shape): ...
    class Square(Shape): ...

Variants may be given as classes or as (dotted) names; names are resolved
lazily because variants usually subclass the union and are defined after it.
The static analyzer recognizes the decorator by name, so the runtime part only
has to record the declaration.
"""

import sys
from typing import List, Optional, Tuple, Union


UNION_VARIANTS_ATTR = "__union_variants__"

VariantRef = Union[type, str]


def union(*variants: VariantRef):
    """Class decorator marking the decorated class as a union of variants"""
    if not variants:
        raise TypeError("union() requires at least one variant type")
    for variant in variants:
        if not isinstance(variant, (type, str)):
            raise TypeError(f"union() variants must be classes or names, got {variant!r}")

    def decorator(cls):
        if not isinstance(cls, type):
            raise TypeError(f"@union can only decorate a class, got {cls!r}")
        setattr(cls, UNION_VARIANTS_ATTR, tuple(variants))
        return cls

    return decorator


def is_union(cls) -> bool:
    """True if cls itself (not a base class) carries the union marker"""
    return isinstance(cls, type) and UNION_VARIANTS_ATTR in cls.__dict__


def _lookup(dotted: str, cls: type) -> Optional[type]:
    module = sys.modules.get(cls.__module__)
    namespaces = [vars(module)] if module is not None else []
    namespaces.append(dict(vars(cls)))

    head, *rest = dotted.split(".")
    for namespace in namespaces:
        if head not in namespace:
            continue
        value = namespace[head]
        for attr in rest:
            value = getattr(value, attr, None)
            if value is None:
                break
        if isinstance(value, type):
            return value
    return None


def get_union_variants(cls) -> Optional[Tuple[type, ...]]:
    """Declared variants of a union class, or None if cls is not a union.

    Names that do not resolve (yet) and duplicates are skipped.
    """
    if not is_union(cls):
        return None
    resolved: List[type] = []
    for ref in cls.__dict__[UNION_VARIANTS_ATTR]:
        variant = _lookup(ref, cls) if isinstance(ref, str) else ref
        if variant is None or variant in resolved:
            continue
        resolved.append(variant)
    return tuple(resolved)
