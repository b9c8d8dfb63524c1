"""
Python source frontend: indexing, type resolution, construct collection and
text emission for ``match`` statements.
"""

from .collector import MatchCollector, Scope, ScopedExpression, classify_pattern, collect_constructs
from .emitter import TextEdit, apply_edits, neutral_value, plan_edit
from .index import ClassInfo, ImportBinding, ModuleIndex, Project, parse_document
from .resolver import ModuleRef, SourceTypeResolver

__all__ = [
    "ClassInfo",
    "ImportBinding",
    "MatchCollector",
    "ModuleIndex",
    "ModuleRef",
    "Project",
    "Scope",
    "ScopedExpression",
    "SourceTypeResolver",
    "TextEdit",
    "apply_edits",
    "classify_pattern",
    "collect_constructs",
    "neutral_value",
    "parse_document",
    "plan_edit",
]
