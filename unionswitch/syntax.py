"""
Syntax model of branching constructs

This is the shared representation the analysis core works on. The frontend
(pysource) builds it from Python ``match`` statements; the core only reads it
and, for fixes, produces replacement values of the same shape.

Pattern shapes:
- BARE:            case A():
- BOUND:           case A() as a:
- STRUCTURAL:      case B(flagged=True):   (member sub-patterns are not analyzed)
- NAME_REFERENCE:  case shapes.A:
- WILDCARD:        case _: / case other:
- OTHER:           literals, sequences, mappings... (cover no variant)
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

from .symbols import TypeIdentity


class ConstructShape(Enum):
    """Statement-form (clauses run bodies) or expression-form (clauses yield values)"""
    STATEMENT = "statement"
    EXPRESSION = "expression"


class PatternKind(Enum):
    BARE = "bare"
    BOUND = "bound"
    STRUCTURAL = "structural"
    NAME_REFERENCE = "name_reference"
    WILDCARD = "wildcard"
    OTHER = "other"


TYPE_TEST_KINDS = frozenset({
    PatternKind.BARE,
    PatternKind.BOUND,
    PatternKind.STRUCTURAL,
    PatternKind.NAME_REFERENCE,
})


@dataclass(frozen=True)
class Location:
    """Source span; line is 1-based, columns are 0-based like the ast module"""
    path: str
    line: int
    column: int
    end_line: int
    end_column: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column + 1}"


@dataclass(frozen=True)
class Pattern:
    """One classified pattern.

    type_ref is whatever the resolver understands as a reference to the tested
    type: an AST expression for parsed patterns, a TypeIdentity for
    synthesized ones.
    """
    kind: PatternKind
    type_ref: Any = None
    binding: Optional[str] = None
    node: Any = field(default=None, compare=False, repr=False)

    @staticmethod
    def bare(type_ref: Any, node: Any = None) -> "Pattern":
        return Pattern(PatternKind.BARE, type_ref, node=node)

    @staticmethod
    def bound(type_ref: Any, binding: str, node: Any = None) -> "Pattern":
        return Pattern(PatternKind.BOUND, type_ref, binding, node=node)

    @staticmethod
    def structural(type_ref: Any, binding: Optional[str] = None, node: Any = None) -> "Pattern":
        return Pattern(PatternKind.STRUCTURAL, type_ref, binding, node=node)

    @staticmethod
    def name_reference(type_ref: Any, node: Any = None) -> "Pattern":
        return Pattern(PatternKind.NAME_REFERENCE, type_ref, node=node)

    @staticmethod
    def wildcard(binding: Optional[str] = None, node: Any = None) -> "Pattern":
        return Pattern(PatternKind.WILDCARD, binding=binding, node=node)

    @staticmethod
    def other(node: Any = None) -> "Pattern":
        return Pattern(PatternKind.OTHER, node=node)

    def is_type_test(self) -> bool:
        return self.kind in TYPE_TEST_KINDS

    def is_wildcard(self) -> bool:
        return self.kind is PatternKind.WILDCARD


@dataclass(frozen=True)
class NoOpBody:
    """Statement-form body that does nothing and leaves the construct"""


@dataclass(frozen=True)
class NeutralValueBody:
    """Expression-form result: the default value of result_type"""
    result_type: Optional[TypeIdentity] = None


@dataclass(frozen=True)
class Clause:
    """One branch: patterns sharing a body, plus an optional guard.

    Parsed clauses keep their original body and AST node; synthesized clauses
    carry a NoOpBody or NeutralValueBody and no node.
    """
    patterns: Tuple[Pattern, ...]
    body: Any = None
    has_guard: bool = False
    node: Any = field(default=None, compare=False, repr=False)

    @property
    def is_synthesized(self) -> bool:
        return self.node is None

    def is_catch_all(self) -> bool:
        """Matches every value: an unguarded wildcard"""
        if self.has_guard:
            return False
        return any(p.is_wildcard() for p in self.patterns)


@dataclass(frozen=True)
class BranchingConstruct:
    """A match over a scrutinee, in statement or expression form"""
    shape: ConstructShape
    scrutinee: Any
    clauses: Tuple[Clause, ...]
    anchor: Location
    result_type_ref: Any = None
    node: Any = field(default=None, compare=False, repr=False)

    def with_clauses(self, clauses: Sequence[Clause]) -> "BranchingConstruct":
        """Copy of this construct with its clause list replaced"""
        return replace(self, clauses=tuple(clauses))

    @property
    def is_expression(self) -> bool:
        return self.shape is ConstructShape.EXPRESSION
