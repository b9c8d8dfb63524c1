#!/usr/bin/env python3
"""
Concurrent analysis tests

Many documents sharing one read-only Project are analyzed on worker threads;
results must not depend on the number of workers.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../..'))

import threading
import unittest

from unionswitch import AnalyzerConfig, Document, UnionSwitchAnalyzer
from test.utils.test_utils import source


SHAPES = source('''
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

USER = source('''
    from shapes import Shape, Circle, Square

    def first(shape: Shape) -> None:
        match shape:
            case Circle():
                pass

    def second(shape: Shape) -> None:
        match shape:
            case Circle() | Square():
                pass
''')


def documents(count: int):
    docs = [Document("shapes.py", SHAPES, "shapes")]
    for i in range(count):
        docs.append(Document(f"user_{i:02d}.py", USER, f"user_{i:02d}"))
    return docs


class TestConcurrentAnalysis(unittest.TestCase):

    def test_parallel_matches_sequential(self):
        docs = documents(20)
        sequential = UnionSwitchAnalyzer(AnalyzerConfig(jobs=1)).analyze_all(docs)
        parallel = UnionSwitchAnalyzer(AnalyzerConfig(jobs=8)).analyze_all(docs)
        self.assertEqual(len(sequential), 40)
        self.assertEqual(parallel, sequential)

    def test_sorted_by_location(self):
        diagnostics = UnionSwitchAnalyzer(AnalyzerConfig(jobs=4)).analyze_all(documents(5))
        keys = [(d.location.path, d.location.line) for d in diagnostics]
        self.assertEqual(keys, sorted(keys))
        self.assertEqual(diagnostics[0].arguments, ("Square", "Triangle"))
        self.assertEqual(diagnostics[1].arguments, ("Triangle",))

    def test_cancelled_before_start(self):
        cancel = threading.Event()
        cancel.set()
        diagnostics = UnionSwitchAnalyzer(AnalyzerConfig(jobs=4)).analyze_all(documents(5), cancel=cancel)
        self.assertEqual(diagnostics, [])

    def test_shared_project(self):
        docs = documents(3)
        analyzer = UnionSwitchAnalyzer(AnalyzerConfig(jobs=3))
        project = analyzer.new_project(docs)
        first = analyzer.analyze_all(docs, project)
        second = analyzer.analyze_all(docs, project)
        self.assertEqual(first, second)
        self.assertEqual(len(project), 4)


if __name__ == '__main__':
    unittest.main()
