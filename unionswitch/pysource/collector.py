"""
Collect branching constructs from Python source

Every ``match`` statement becomes a BranchingConstruct:

- expression-form when it is used as a value, i.e. every case body is a
  single ``return <expr>``; its result type is the function's return
  annotation
- statement-form otherwise

Patterns are classified into the closed set of shapes of syntax.PatternKind.
Or-patterns contribute one Pattern per alternative; ``P as name`` keeps the
shape of P and records the binding.
"""

import ast
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..syntax import (
    BranchingConstruct,
    Clause,
    ConstructShape,
    Location,
    Pattern,
    PatternKind,
)
from .index import ClassInfo, ModuleIndex, first_parameter, is_staticmethod


MATCH_KEYWORD = "match"


@dataclass
class Scope:
    """Lexical scope with the annotations visible in it"""
    kind: str  # 'module', 'class' or 'function'
    parent: Optional["Scope"] = None
    # A name mapped to None is bound here without a usable annotation
    annotations: Dict[str, Optional[ast.expr]] = field(default_factory=dict)
    # Function scopes of methods: the owning class and the name of ``self``
    class_info: Optional[ClassInfo] = None
    self_name: Optional[str] = None
    return_annotation: Optional[ast.expr] = None

    def lookup_annotation(self, name: str) -> Optional[ast.expr]:
        """Annotation of a variable, following Python's scoping rules.

        The innermost scope binding the name wins, even without an
        annotation. Class bodies are not visible from functions nested in them.
        """
        scope = self
        while scope is not None:
            if scope is self or scope.kind != "class":
                if name in scope.annotations:
                    return scope.annotations[name]
            scope = scope.parent
        return None

    def enclosing_method(self) -> Optional["Scope"]:
        scope = self
        while scope is not None:
            if scope.kind == "function" and scope.class_info is not None:
                return scope
            scope = scope.parent
        return None

    def enclosing_function(self) -> Optional["Scope"]:
        scope = self
        while scope is not None:
            if scope.kind == "function":
                return scope
            scope = scope.parent
        return None


@dataclass(frozen=True)
class ScopedExpression:
    """A scrutinee expression together with the scope it is evaluated in"""
    node: ast.expr
    scope: Scope = field(compare=False)


def classify_pattern(pattern: ast.pattern) -> List[Pattern]:
    """Classify a case pattern into one or more shaped patterns"""
    if isinstance(pattern, ast.MatchOr):
        result: List[Pattern] = []
        for alternative in pattern.patterns:
            result.extend(classify_pattern(alternative))
        return result

    if isinstance(pattern, ast.MatchAs):
        if pattern.pattern is None:
            # case _: / case name:
            return [Pattern.wildcard(pattern.name, node=pattern)]
        return [_bind(inner, pattern.name) for inner in classify_pattern(pattern.pattern)]

    if isinstance(pattern, ast.MatchClass):
        if pattern.patterns or pattern.kwd_patterns:
            return [Pattern.structural(pattern.cls, node=pattern)]
        return [Pattern.bare(pattern.cls, node=pattern)]

    if isinstance(pattern, ast.MatchValue) and isinstance(pattern.value, (ast.Name, ast.Attribute)):
        return [Pattern.name_reference(pattern.value, node=pattern)]

    return [Pattern.other(node=pattern)]


def _bind(pattern: Pattern, name: Optional[str]) -> Pattern:
    if name is None:
        return pattern
    if pattern.kind in (PatternKind.BARE, PatternKind.NAME_REFERENCE):
        return Pattern.bound(pattern.type_ref, name, node=pattern.node)
    if pattern.kind in (PatternKind.STRUCTURAL, PatternKind.WILDCARD):
        return Pattern(pattern.kind, pattern.type_ref, name, node=pattern.node)
    return pattern


def is_value_match(node: ast.Match) -> bool:
    """True when every case just returns a value"""
    if not node.cases:
        return False
    for case in node.cases:
        if len(case.body) != 1:
            return False
        stmt = case.body[0]
        if not isinstance(stmt, ast.Return) or stmt.value is None:
            return False
    return True


def anchor_location(node: ast.Match, path: str) -> Location:
    """Span of the ``match`` keyword"""
    return Location(path, node.lineno, node.col_offset,
                    node.lineno, node.col_offset + len(MATCH_KEYWORD))


def _function_annotations(node) -> Dict[str, Optional[ast.expr]]:
    """Annotations of a function's locals; unannotated parameters map to None"""
    annotations: Dict[str, Optional[ast.expr]] = {}
    args = node.args
    for arg in list(args.posonlyargs) + list(args.args) + list(args.kwonlyargs):
        annotations[arg.arg] = arg.annotation
    # *args and **kwargs are never the annotated type itself
    for arg in (args.vararg, args.kwarg):
        if arg is not None:
            annotations[arg.arg] = None

    # Annotated assignments anywhere in the body, but not in nested scopes
    pending = list(node.body)
    while pending:
        stmt = pending.pop()
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            continue
        if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
            if annotations.get(stmt.target.id) is None:
                annotations[stmt.target.id] = stmt.annotation
        for child in ast.iter_child_nodes(stmt):
            if isinstance(child, ast.stmt) or isinstance(child, (ast.excepthandler, ast.match_case)):
                pending.append(child)
    return annotations


class MatchCollector(ast.NodeVisitor):
    """Walk a module and build a BranchingConstruct for every match statement.

    Usage:
        collector = MatchCollector(module_index)
        constructs = collector.collect()
    """

    def __init__(self, module: ModuleIndex, path: Optional[str] = None):
        self.module = module
        self.path = path or module.path
        self.constructs: List[BranchingConstruct] = []
        self._scope = Scope("module", annotations=dict(module.annotations))
        self._class_path: List[str] = []
        self._function_depth = 0

    def collect(self) -> List[BranchingConstruct]:
        self.constructs = []
        self.visit(self.module.tree)
        return self.constructs

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def visit_ClassDef(self, node: ast.ClassDef):
        self._class_path.append(node.name)
        class_info = None
        if self._function_depth == 0:
            class_info = self.module.classes.get(".".join(self._class_path))
        outer = self._scope
        self._scope = Scope("class", outer, dict(class_info.attribute_annotations) if class_info else {},
                            class_info=class_info)
        try:
            self.generic_visit(node)
        finally:
            self._scope = outer
            self._class_path.pop()

    def _visit_function(self, node):
        outer = self._scope
        scope = Scope("function", outer, _function_annotations(node),
                      return_annotation=node.returns)
        if outer.kind == "class" and outer.class_info is not None and not is_staticmethod(node):
            scope.class_info = outer.class_info
            scope.self_name = first_parameter(node)

        self._scope = scope
        self._function_depth += 1
        try:
            for stmt in node.body:
                self.visit(stmt)
        finally:
            self._function_depth -= 1
            self._scope = outer

    def visit_FunctionDef(self, node: ast.FunctionDef):
        self._visit_function(node)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef):
        self._visit_function(node)

    # ------------------------------------------------------------------
    # Constructs
    # ------------------------------------------------------------------

    def visit_Match(self, node: ast.Match):
        self.constructs.append(self.build_construct(node))
        # Nested matches inside case bodies
        self.generic_visit(node)

    def build_construct(self, node: ast.Match) -> BranchingConstruct:
        function = self._scope.enclosing_function()
        shape = ConstructShape.STATEMENT
        result_type_ref = None
        if function is not None and is_value_match(node):
            shape = ConstructShape.EXPRESSION
            result_type_ref = function.return_annotation

        clauses = tuple(
            Clause(
                patterns=tuple(classify_pattern(case.pattern)),
                body=tuple(case.body),
                has_guard=case.guard is not None,
                node=case,
            )
            for case in node.cases
        )
        return BranchingConstruct(
            shape=shape,
            scrutinee=ScopedExpression(node.subject, self._scope),
            clauses=clauses,
            anchor=anchor_location(node, self.path),
            result_type_ref=result_type_ref,
            node=node,
        )


def collect_constructs(module: ModuleIndex, path: Optional[str] = None) -> List[BranchingConstruct]:
    return MatchCollector(module, path).collect()
