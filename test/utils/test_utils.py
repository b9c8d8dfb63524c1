"""
Test utilities for unionswitch tests

This module provides:
1. FakeTypeResolver - In-memory TypeResolver for exercising the core
2. Construct builders - Short helpers for clauses and constructs
3. SourceTestCase - Base class for source-level tests with proper setup
"""

import textwrap
import unittest
from typing import Dict, List, Optional, Sequence

from unionswitch.checker import Diagnostic
from unionswitch.config import AnalyzerConfig
from unionswitch.document import Document
from unionswitch.analyzer import UnionSwitchAnalyzer
from unionswitch.fixer import UnionSwitchFixer
from unionswitch.logger import set_raise_on_error
from unionswitch.symbols import TypeIdentity, TypeResolver
from unionswitch.syntax import (
    BranchingConstruct,
    Clause,
    ConstructShape,
    Location,
    Pattern,
)


def t(name: str, module: str = "shapes") -> TypeIdentity:
    """Shorthand for a TypeIdentity in a test module"""
    return TypeIdentity(module, name)


class FakeTypeResolver(TypeResolver):
    """
    TypeResolver backed by dictionaries.

    Scrutinees and pattern type references are plain strings (or
    TypeIdentity values); they are looked up in `expressions` and `types`.
    """

    def __init__(self, unions: Optional[Dict[TypeIdentity, Sequence[Optional[TypeIdentity]]]] = None,
                 expressions: Optional[Dict[str, TypeIdentity]] = None,
                 types: Optional[Dict[str, TypeIdentity]] = None):
        self.unions = dict(unions or {})
        self.expressions = dict(expressions or {})
        self.types = dict(types or {})
        self.marker_queries: List[TypeIdentity] = []

    def resolve_static_type(self, expr):
        return self.expressions.get(expr)

    def resolve_type_reference(self, ref):
        if isinstance(ref, TypeIdentity):
            return ref
        return self.types.get(ref)

    def get_marker_types(self, type_id):
        self.marker_queries.append(type_id)
        return self.unions.get(type_id)


def shapes_resolver() -> FakeTypeResolver:
    """Resolver knowing `shape: Shape` where Shape = union(Circle, Square, Triangle)"""
    circle, square, triangle = t("Circle"), t("Square"), t("Triangle")
    return FakeTypeResolver(
        unions={t("Shape"): [circle, square, triangle]},
        expressions={"shape": t("Shape"), "count": t("int", "builtins")},
        types={"Circle": circle, "Square": square, "Triangle": triangle, "Point": t("Point")},
    )


ANCHOR = Location("shapes.py", 3, 4, 3, 9)


def clause(*patterns: Pattern, guard: bool = False) -> Clause:
    # Any non-None node marks the clause as parsed
    return Clause(patterns=tuple(patterns), body=("...",), has_guard=guard, node=object())


def construct(*clauses: Clause, scrutinee="shape",
              shape: ConstructShape = ConstructShape.STATEMENT,
              result_type_ref=None) -> BranchingConstruct:
    return BranchingConstruct(shape, scrutinee, tuple(clauses), ANCHOR, result_type_ref)


def source(text: str) -> str:
    """Dedent a triple-quoted source snippet"""
    return textwrap.dedent(text).lstrip("\n")


class SourceTestCase(unittest.TestCase):
    """
    Base class for tests that analyze and fix Python source.

    Enables raise-on-error so unparsable test input fails loudly.
    """

    config = AnalyzerConfig(jobs=2)

    def setUp(self):
        set_raise_on_error(True)

    def tearDown(self):
        set_raise_on_error(False)

    def document(self, text: str, path: str = "shapes.py", module_name: str = "shapes") -> Document:
        return Document(path, source(text), module_name)

    def analyze(self, text: str, **kwargs) -> List[Diagnostic]:
        return UnionSwitchAnalyzer(self.config).analyze(self.document(text, **kwargs))

    def fix(self, text: str, **kwargs) -> str:
        return UnionSwitchFixer(self.config).fix_all(self.document(text, **kwargs)).text

    def assertMissing(self, diagnostics: List[Diagnostic], *expected: Sequence[str]):
        """Assert one diagnostic per construct with the given missing names"""
        self.assertEqual([list(d.arguments) for d in diagnostics], [list(e) for e in expected])
