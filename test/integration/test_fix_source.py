#!/usr/bin/env python3
"""
Source-level fix tests

Applies the fixer to complete modules and checks the exact text produced:
placement of the synthesized cases, indentation, default return values and
idempotence.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../..'))

import unittest

from unionswitch import Document, UnionSwitchAnalyzer, UnionSwitchFixer, fix_source
from test.utils.test_utils import SourceTestCase, source


HEADER = source('''
    from typing import Optional
    from unionswitch import union

    @union("Circle", "Square", "Triangle")
    class Shape:
        pass

    class Circle(Shape):
        pass

    class Square(Shape):
        pass

    class Triangle(Shape):
        pass
''')


class TestFixStatementForm(SourceTestCase):
    """Statement-form matches get ``case X(): pass``"""

    def test_appends_missing_case(self):
        fixed = self.fix(HEADER + source('''
            def area(shape: Shape) -> None:
                match shape:
                    case Circle():
                        print("circle")
                    case Square():
                        print("square")
                print("done")
        '''))
        self.assertTrue(fixed.endswith(source('''
            def area(shape: Shape) -> None:
                match shape:
                    case Circle():
                        print("circle")
                    case Square():
                        print("square")
                    case Triangle():
                        pass
                print("done")
        ''')))

    def test_inserts_before_catch_all(self):
        fixed = self.fix(HEADER + source('''
            def area(shape: Shape) -> None:
                match shape:
                    case Circle():
                        pass
                    case Square():
                        pass
                    case _:
                        raise ValueError(shape)
        '''))
        self.assertTrue(fixed.endswith(source('''
            def area(shape: Shape) -> None:
                match shape:
                    case Circle():
                        pass
                    case Square():
                        pass
                    case Triangle():
                        pass
                    case _:
                        raise ValueError(shape)
        ''')))

    def test_comment_stays_with_catch_all(self):
        fixed = self.fix(HEADER + source('''
            def area(shape: Shape) -> None:
                match shape:
                    case Circle():
                        pass
                    # Anything else is a bug
                    case _:
                        pass
        '''))
        self.assertTrue(fixed.endswith(source('''
            def area(shape: Shape) -> None:
                match shape:
                    case Circle():
                        pass
                    case Square():
                        pass
                    case Triangle():
                        pass
                    # Anything else is a bug
                    case _:
                        pass
        ''')))

    def test_guarded_wildcard_is_not_catch_all(self):
        fixed = self.fix(HEADER + source('''
            def area(shape: Shape, strict: bool) -> None:
                match shape:
                    case Circle() | Square():
                        pass
                    case other if strict:
                        pass
        '''))
        self.assertTrue(fixed.endswith(
            "        case other if strict:\n"
            "            pass\n"
            "        case Triangle():\n"
            "            pass\n"
        ))

    def test_one_line_cases(self):
        fixed = self.fix(HEADER + source('''
            def area(shape: Shape) -> None:
                match shape:
                    case Circle(): pass
                    case Square(): pass
        '''))
        self.assertTrue(fixed.endswith(
            "        case Square(): pass\n"
            "        case Triangle():\n"
            "            pass\n"
        ))

    def test_parenthesized_catch_all(self):
        fixed = self.fix(HEADER + source('''
            def area(shape: Shape) -> None:
                match shape:
                    case Circle(): pass
                    case (
                        _
                    ):
                        pass
        '''))
        self.assertTrue(fixed.endswith(
            "        case Circle(): pass\n"
            "        case Square():\n"
            "            pass\n"
            "        case Triangle():\n"
            "            pass\n"
            "        case (\n"
            "            _\n"
            "        ):\n"
            "            pass\n"
        ))
        compile(fixed, "<fixed>", "exec")

    def test_tab_indentation(self):
        text = HEADER + "def area(shape: Shape) -> None:\n\tmatch shape:\n\t\tcase Circle():\n\t\t\tpass\n"
        fixed = self.fix(text)
        self.assertTrue(fixed.endswith(
            "\t\tcase Circle():\n\t\t\tpass\n"
            "\t\tcase Square():\n\t\t\tpass\n"
            "\t\tcase Triangle():\n\t\t\tpass\n"
        ))

    def test_no_trailing_newline(self):
        fixed = self.fix(HEADER + "def area(shape: Shape) -> None:\n    match shape:\n        case Circle() | Square():\n            pass")
        self.assertTrue(fixed.endswith(
            "            pass\n        case Triangle():\n            pass\n"
        ))

    def test_crlf_preserved(self):
        text = (HEADER + source('''
            def area(shape: Shape) -> None:
                match shape:
                    case Circle() | Triangle():
                        pass
        ''')).replace("\n", "\r\n")
        fixed = self.fix(text)
        self.assertTrue(fixed.endswith(
            "        case Circle() | Triangle():\r\n"
            "            pass\r\n"
            "        case Square():\r\n"
            "            pass\r\n"
        ))
        self.assertNotIn("\n", fixed.replace("\r\n", ""))

    def test_nested_matches(self):
        fixed = self.fix(HEADER + source('''
            def pair(a: Shape, b: Shape) -> None:
                match a:
                    case Circle() | Square():
                        match b:
                            case Circle() | Square():
                                pass
        '''))
        self.assertTrue(fixed.endswith(source('''
            def pair(a: Shape, b: Shape) -> None:
                match a:
                    case Circle() | Square():
                        match b:
                            case Circle() | Square():
                                pass
                            case Triangle():
                                pass
                    case Triangle():
                        pass
        ''')))

    def test_idempotent(self):
        text = HEADER + source('''
            def area(shape: Shape) -> None:
                match shape:
                    case Square():
                        pass
        ''')
        fixed = self.fix(text)
        self.assertNotEqual(fixed, text)
        self.assertEqual(self.analyze(fixed), [])
        self.assertEqual(self.fix(fixed), fixed)

    def test_exhaustive_source_untouched(self):
        text = HEADER + source('''
            def area(shape: Shape) -> None:
                match shape:
                    case Circle() | Square() | Triangle():
                        pass
        ''')
        document = self.document(text)
        self.assertIs(UnionSwitchFixer(self.config).fix_all(document), document)


class TestFixExpressionForm(SourceTestCase):
    """Expression-form matches get ``case X(): return <default>``"""

    def fixed_tail(self, return_type: str) -> str:
        fixed = self.fix(HEADER + source(f'''
            def describe(shape: Shape) -> {return_type}:
                match shape:
                    case Circle():
                        return compute()
                    case Square():
                        return compute()
        '''))
        return fixed.splitlines()[-1].strip()

    def test_str_default(self):
        self.assertEqual(self.fixed_tail("str"), "return ''")

    def test_builtin_defaults(self):
        for annotation, expected in [("int", "return 0"), ("bool", "return False"),
                                     ("list[int]", "return []"), ("dict", "return {}")]:
            with self.subTest(annotation=annotation):
                self.assertEqual(self.fixed_tail(annotation), expected)

    def test_unknown_types_return_none(self):
        self.assertEqual(self.fixed_tail("Optional[str]"), "return None")
        self.assertEqual(self.fixed_tail("Shape"), "return None")

    def test_missing_annotation(self):
        fixed = self.fix(HEADER + source('''
            def describe(shape: Shape):
                match shape:
                    case Circle() | Square():
                        return "round or square"
        '''))
        self.assertTrue(fixed.endswith("    case Triangle():\n            return None\n"))


class TestFixer(SourceTestCase):
    """UnionSwitchFixer entry points"""

    def test_fix_single_diagnostic(self):
        text = HEADER + source('''
            def a(shape: Shape) -> None:
                match shape:
                    case Circle():
                        pass

            def b(shape: Shape) -> None:
                match shape:
                    case Circle():
                        pass
        ''')
        document = self.document(text)
        diagnostics = UnionSwitchAnalyzer(self.config).analyze(document)
        self.assertEqual(len(diagnostics), 2)

        fixed = UnionSwitchFixer(self.config).fix(document, diagnostics[1])
        remaining = UnionSwitchAnalyzer(self.config).analyze(fixed)
        self.assertEqual(len(remaining), 1)
        self.assertEqual(remaining[0].location, diagnostics[0].location)

    def test_stale_diagnostic_is_ignored(self):
        text = HEADER + source('''
            def a(shape: Shape) -> None:
                match shape:
                    case Circle():
                        pass
        ''')
        document = self.document(text)
        (diagnostic,) = UnionSwitchAnalyzer(self.config).analyze(document)
        fixed = UnionSwitchFixer(self.config).fix_all(document)
        self.assertIs(UnionSwitchFixer(self.config).fix(fixed, diagnostic), fixed)

    def test_spelling_follows_imports(self):
        project_documents = [
            Document("shapes.py", HEADER, "shapes"),
        ]
        app = Document("app.py", source('''
            import shapes as sh

            def area(shape: sh.Shape) -> None:
                match shape:
                    case sh.Circle():
                        pass
        '''), "app")
        analyzer = UnionSwitchAnalyzer(self.config)
        project = analyzer.new_project(project_documents + [app])
        fixed = UnionSwitchFixer(self.config).fix_all(app, project)
        self.assertTrue(fixed.text.endswith(
            "        case sh.Square():\n            pass\n"
            "        case sh.Triangle():\n            pass\n"
        ))

    def test_fix_source_helper(self):
        text = HEADER + source('''
            def area(shape: Shape) -> None:
                match shape:
                    case _:
                        pass
        ''')
        fixed = fix_source(text, module_name="shapes")
        self.assertIn("case Circle():\n            pass\n        case Square():", fixed)
        self.assertTrue(fixed.endswith("        case _:\n            pass\n"))


if __name__ == '__main__':
    unittest.main()
