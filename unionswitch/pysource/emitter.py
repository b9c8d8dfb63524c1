"""
Source emission for synthesized clauses

Fixes are applied as line insertions into the original text, so everything
outside the spliced clause list is left byte-for-byte intact.

    match shape:                   match shape:
        case Circle():                 case Circle():
            ...                            ...
        case _:           ->           case Square():
            ...                            pass
                                       case _:
                                           ...
"""

import ast
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..symbols import TypeIdentity
from ..syntax import BranchingConstruct, Clause, NeutralValueBody, NoOpBody, PatternKind


DEFAULT_INDENT = "    "
_CASE_KEYWORD = re.compile(r"\s*case\b")


def _call(name: str) -> ast.expr:
    return ast.Call(func=ast.Name(id=name, ctx=ast.Load()), args=[], keywords=[])


# Default ("neutral") values of builtin result types
_BUILTIN_DEFAULTS = {
    "str": lambda: ast.Constant(value=""),
    "int": lambda: ast.Constant(value=0),
    "float": lambda: ast.Constant(value=0.0),
    "complex": lambda: ast.Constant(value=0j),
    "bool": lambda: ast.Constant(value=False),
    "bytes": lambda: ast.Constant(value=b""),
    "list": lambda: ast.List(elts=[], ctx=ast.Load()),
    "dict": lambda: ast.Dict(keys=[], values=[]),
    "tuple": lambda: ast.Tuple(elts=[], ctx=ast.Load()),
    "set": lambda: _call("set"),
    "frozenset": lambda: _call("frozenset"),
    "bytearray": lambda: _call("bytearray"),
}

# typing aliases of builtin containers
_TYPING_ALIASES = {
    "List": "list",
    "Dict": "dict",
    "Tuple": "tuple",
    "Set": "set",
    "FrozenSet": "frozenset",
    "Text": "str",
}


def neutral_value(result_type: Optional[TypeIdentity]) -> ast.expr:
    """Default value of result_type; None for unknown or non-builtin types"""
    if result_type is not None:
        name = None
        if result_type.is_builtin:
            name = result_type.qualname
        elif result_type.module == "typing":
            name = _TYPING_ALIASES.get(result_type.qualname)
        factory = _BUILTIN_DEFAULTS.get(name)
        if factory is not None:
            return factory()
    return ast.Constant(value=None)


@dataclass(frozen=True)
class TextEdit:
    """Insert text before line index `line` (0-based)"""
    line: int
    text: str
    # Indentation width of the edited construct, orders edits on the same line
    column: int = 0


def detect_newline(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def _indent_of(line: str) -> str:
    return line[:len(line) - len(line.lstrip(" \t"))]


def _case_line(clause: Clause, source_lines: Sequence[str]) -> int:
    """1-based line of the ``case`` keyword.

    A parenthesized pattern can start below the keyword, so scan upward from
    the pattern's first line.
    """
    line = clause.node.pattern.lineno
    while line > 1 and not _CASE_KEYWORD.match(source_lines[line - 1]):
        line -= 1
    return line


def _clause_end(clause: Clause) -> int:
    """1-based last line of a clause"""
    return max(getattr(stmt, "end_lineno", stmt.lineno) for stmt in clause.node.body)


def render_pattern(clause: Clause, spell: Callable[[TypeIdentity], str]) -> str:
    parts = []
    for pattern in clause.patterns:
        if pattern.kind is PatternKind.WILDCARD:
            parts.append(pattern.binding or "_")
            continue
        type_ref = pattern.type_ref
        name = spell(type_ref) if isinstance(type_ref, TypeIdentity) else ast.unparse(type_ref)
        text = f"{name}()"
        if pattern.binding:
            text = f"{text} as {pattern.binding}"
        parts.append(text)
    return " | ".join(parts)


def render_body(clause: Clause) -> str:
    if isinstance(clause.body, NeutralValueBody):
        return f"return {ast.unparse(neutral_value(clause.body.result_type))}"
    if isinstance(clause.body, NoOpBody):
        return "pass"
    raise TypeError(f"Cannot render clause body {clause.body!r}")


def render_clauses(clauses: Sequence[Clause], spell: Callable[[TypeIdentity], str],
                   case_indent: str, body_indent: str, newline: str = "\n") -> str:
    lines = []
    for clause in clauses:
        lines.append(f"{case_indent}case {render_pattern(clause, spell)}:{newline}")
        lines.append(f"{body_indent}{render_body(clause)}{newline}")
    return "".join(lines)


def plan_edit(construct: BranchingConstruct, updated: Sequence[Clause], source_lines: List[str],
              spell: Callable[[TypeIdentity], str], newline: str = "\n") -> Optional[TextEdit]:
    """Text edit turning construct's clauses into `updated`.

    `updated` must be the result of splicing synthesized clauses into the
    construct's own clauses.
    """
    new_clauses = [c for c in updated if c.is_synthesized]
    original = [c for c in updated if not c.is_synthesized]
    if not new_clauses or not original:
        return None

    first_case = original[0]
    case_indent = _indent_of(source_lines[_case_line(first_case, source_lines) - 1])
    first_stmt = first_case.node.body[0]
    header = first_case.node.guard or first_case.node.pattern
    if first_stmt.lineno > header.end_lineno:
        body_indent = _indent_of(source_lines[first_stmt.lineno - 1])
    else:
        # ``case A(): pass`` on one line
        body_indent = case_indent + DEFAULT_INDENT

    start = next(i for i, clause in enumerate(updated) if clause.is_synthesized)
    following = updated[start + len(new_clauses)] if start + len(new_clauses) < len(updated) else None

    if following is not None:
        line = _case_line(following, source_lines) - 1
        # Keep comments that introduce the following case attached to it
        while line > 0:
            previous = source_lines[line - 1]
            if previous.strip().startswith("#") and _indent_of(previous) == case_indent:
                line -= 1
            else:
                break
    else:
        line = _clause_end(original[-1])

    text = render_clauses(new_clauses, spell, case_indent, body_indent, newline)
    if line >= len(source_lines) and source_lines and not source_lines[-1].endswith(("\n", "\r")):
        text = newline + text
    return TextEdit(line, text, len(case_indent))


def apply_edits(text: str, edits: Sequence[TextEdit]) -> str:
    """Apply insertions bottom-up so earlier line numbers stay valid.

    Edits on the same line are applied outermost first, which leaves the
    inner (more indented) construct's clauses above the outer ones.
    """
    if not edits:
        return text
    lines = text.splitlines(keepends=True)
    for edit in sorted(edits, key=lambda e: (-e.line, e.column)):
        lines[edit.line:edit.line] = [edit.text]
    return "".join(lines)
