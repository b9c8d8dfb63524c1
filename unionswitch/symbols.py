"""
Type identities and the type-resolution interface

The analysis core never inspects source text or annotations itself. Everything
it knows about types arrives through a TypeResolver:

- resolve_static_type(expr): static type of a scrutinee expression
- resolve_type_reference(ref): the type named by a pattern's class reference
- get_marker_types(type): raw variant list of a union marker (or None)
- type_identity_eq(a, b): nominal equality

Type identity is nominal: two types are the same iff they are declared under
the same (module, qualname), regardless of their members.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence


BUILTINS_MODULE = "builtins"


@dataclass(frozen=True)
class TypeIdentity:
    """Nominal identity of a declared type"""
    module: str
    qualname: str

    @property
    def name(self) -> str:
        """Short display name (last component of the qualified name)"""
        return self.qualname.rsplit(".", 1)[-1]

    @property
    def is_builtin(self) -> bool:
        return self.module == BUILTINS_MODULE

    def __str__(self) -> str:
        if not self.module:
            return self.qualname
        return f"{self.module}.{self.qualname}"


def builtin_type(name: str) -> TypeIdentity:
    return TypeIdentity(BUILTINS_MODULE, name)


class TypeResolver(ABC):
    """Type/attribute resolution collaborator used by the analysis core.

    Implementations must be safe to call from several threads at once; the
    core treats them as read-only snapshots.
    """

    @abstractmethod
    def resolve_static_type(self, expr: Any) -> Optional[TypeIdentity]:
        """Static type of a scrutinee expression, or None if unknown"""

    @abstractmethod
    def resolve_type_reference(self, ref: Any) -> Optional[TypeIdentity]:
        """Type named by a type reference (pattern class, annotation).

        A TypeIdentity passed in is returned unchanged, so synthesized
        patterns resolve the same way parsed ones do.
        """

    @abstractmethod
    def get_marker_types(self, type_id: TypeIdentity) -> Optional[Sequence[Optional[TypeIdentity]]]:
        """Raw variant entries of the union marker on type_id.

        Returns None when the type carries no marker. Entries that could not
        be resolved are reported as None.
        """

    def type_identity_eq(self, a: TypeIdentity, b: TypeIdentity) -> bool:
        return a == b
