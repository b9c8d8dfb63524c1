"""
Unit tests for the exhaustiveness checker and diagnostics
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from unionswitch.checker import (
    DIAGNOSTIC_ID,
    Severity,
    check,
    find_missing,
    to_diagnostic,
)
from unionswitch.syntax import Pattern
from test.utils.test_utils import ANCHOR, clause, construct, shapes_resolver, t


class TestCheck(unittest.TestCase):
    """Test check() on constructs over Shape = union(Circle, Square, Triangle)"""

    def setUp(self):
        self.resolver = shapes_resolver()

    def test_missing_variant_reported(self):
        report = check(construct(
            clause(Pattern.bare("Circle")),
            clause(Pattern.bare("Square")),
        ), self.resolver)
        self.assertEqual(report.union, t("Shape"))
        self.assertEqual(report.missing, (t("Triangle"),))
        self.assertEqual(report.anchor, ANCHOR)

    def test_catch_all_does_not_suppress_report(self):
        report = check(construct(
            clause(Pattern.bare("Circle")),
            clause(Pattern.bare("Square")),
            clause(Pattern.wildcard()),
        ), self.resolver)
        self.assertEqual(report.names, ("Triangle",))

    def test_mixed_shapes_exhaustive(self):
        report = check(construct(
            clause(Pattern.bare("Circle")),
            clause(Pattern.bound("Square", "sq")),
            clause(Pattern.structural("Triangle")),
        ), self.resolver)
        self.assertIsNone(report)

    def test_missing_in_declaration_order(self):
        report = check(construct(clause(Pattern.bare("Square"))), self.resolver)
        self.assertEqual(report.names, ("Circle", "Triangle"))
        self.assertEqual(report.display, "Circle, Triangle")

    def test_unmarked_scrutinee(self):
        self.assertIsNone(check(construct(scrutinee="count"), self.resolver))

    def test_unresolved_scrutinee(self):
        self.assertIsNone(check(construct(scrutinee="unknown"), self.resolver))

    def test_empty_construct_misses_everything(self):
        report = check(construct(), self.resolver)
        self.assertEqual(report.names, ("Circle", "Square", "Triangle"))

    def test_find_missing_on_exhaustive_construct(self):
        variants, missing = find_missing(construct(
            clause(Pattern.bare("Circle"), Pattern.bare("Square"), Pattern.bare("Triangle")),
        ), self.resolver)
        self.assertEqual(variants.names, ("Circle", "Square", "Triangle"))
        self.assertEqual(missing, ())


class TestDiagnostic(unittest.TestCase):
    """Test diagnostic records"""

    def test_to_diagnostic(self):
        report = check(construct(clause(Pattern.bare("Circle"))), shapes_resolver())
        diagnostic = to_diagnostic(report)
        self.assertEqual(diagnostic.code, DIAGNOSTIC_ID)
        self.assertEqual(diagnostic.code, "UNION001")
        self.assertEqual(diagnostic.severity, Severity.WARNING)
        self.assertEqual(diagnostic.arguments, ("Square", "Triangle"))
        self.assertEqual(diagnostic.message,
                         "Match on union 'Shape' does not handle: Square, Triangle")
        self.assertEqual(diagnostic.location, ANCHOR)

    def test_format(self):
        report = check(construct(clause(Pattern.bare("Circle"))), shapes_resolver())
        diagnostic = to_diagnostic(report, Severity.ERROR)
        self.assertEqual(diagnostic.severity, Severity.ERROR)
        self.assertTrue(diagnostic.format().startswith("shapes.py:3:5: UNION001 "))


if __name__ == '__main__':
    unittest.main()
