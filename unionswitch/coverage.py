"""
Pattern coverage extraction

Collects the variant types a branching construct's clauses statically cover.

Key decisions:
- Every type-testing shape (bare, bound, structural, name reference) covers
  exactly its tested type; nested member constraints are not analyzed, so
  ``B(flagged=True)`` and ``B(flagged=False)`` both count as covering B
- Guards do not reduce coverage; ``case A() if ok:`` covers A
- Wildcards cover no variant, they only mark the construct as having a
  catch-all (unguarded wildcards only)
- Patterns whose tested type cannot be resolved contribute nothing
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Tuple

from .logger import logger
from .symbols import TypeIdentity, TypeResolver
from .syntax import BranchingConstruct


@dataclass(frozen=True)
class Coverage:
    """Covered types in first-seen order, plus whether a catch-all exists"""
    covered: Tuple[TypeIdentity, ...]
    has_catch_all: bool = False

    def covers(self, type_id: TypeIdentity, resolver: TypeResolver) -> bool:
        return any(resolver.type_identity_eq(type_id, t) for t in self.covered)


def extract_coverage(construct: BranchingConstruct, resolver: TypeResolver) -> Coverage:
    """Walk clauses and patterns in order and record covered types"""
    covered: List[TypeIdentity] = []
    has_catch_all = False

    for clause in construct.clauses:
        for pattern in clause.patterns:
            if pattern.is_wildcard():
                if not clause.has_guard:
                    has_catch_all = True
                continue

            if not pattern.is_type_test():
                continue

            tested = resolver.resolve_type_reference(pattern.type_ref)
            if tested is None:
                logger.debug("Pattern type could not be resolved", node=pattern.node,
                             kind=pattern.kind.value)
                continue

            # Redundant coverage counts once
            if any(resolver.type_identity_eq(tested, t) for t in covered):
                continue
            covered.append(tested)

    return Coverage(tuple(covered), has_catch_all)


def covered_types(construct: BranchingConstruct, resolver: TypeResolver) -> FrozenSet[TypeIdentity]:
    """Set of types covered by the construct's clauses"""
    return frozenset(extract_coverage(construct, resolver).covered)
