"""
Union match fixer

Adds the missing variant cases to non-exhaustive union matches.

The fixer never trusts the diagnostic it is handed beyond its location: the
document is re-indexed and the missing variants are computed again, because
the text may have changed since the diagnostic was produced. When nothing is
left to fix the original document is returned unchanged.
"""

from dataclasses import dataclass
from typing import List, Optional

from .checker import Diagnostic, find_missing
from .config import AnalyzerConfig
from .document import Document
from .logger import logger
from .pysource import Project, SourceTypeResolver, collect_constructs
from .pysource.emitter import TextEdit, apply_edits, detect_newline, plan_edit
from .splice import splice
from .synthesizer import synthesize
from .syntax import BranchingConstruct


@dataclass(frozen=True)
class ConstructFix:
    """A planned fix: the construct and the text edit that completes it"""
    construct: BranchingConstruct
    edit: TextEdit


class UnionSwitchFixer:
    """Synthesize and insert the cases a union match is missing.

    Usage:
        fixer = UnionSwitchFixer()
        fixed = fixer.fix_all(document)
        if fixed is not document:
            fixed.write()
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or AnalyzerConfig()

    def plan(self, document: Document, project: Optional[Project] = None) -> List[ConstructFix]:
        """Fixes for every non-exhaustive construct of document"""
        if project is None:
            project = Project(self.config.marker_names)
        project, module = project.with_document(document)
        if module is None:
            return []

        resolver = SourceTypeResolver(project, module)
        source_lines = document.text.splitlines(keepends=True)
        newline = detect_newline(document.text)

        fixes = []
        for construct in collect_constructs(module, document.path):
            found = find_missing(construct, resolver)
            if found is None:
                continue
            _, missing = found
            if not missing:
                continue

            result_type = None
            if construct.is_expression and construct.result_type_ref is not None:
                result_type = resolver.resolve_type_reference(construct.result_type_ref)

            new_clauses = synthesize(missing, construct.shape, result_type)
            updated = construct.with_clauses(splice(construct.clauses, new_clauses))
            edit = plan_edit(construct, updated.clauses, source_lines, resolver.spell, newline)
            if edit is None:
                continue
            fixes.append(ConstructFix(construct, edit))
        return fixes

    def fix(self, document: Document, diagnostic: Diagnostic,
            project: Optional[Project] = None) -> Document:
        """Fix the construct a diagnostic points at"""
        location = diagnostic.location
        for planned in self.plan(document, project):
            anchor = planned.construct.anchor
            if (anchor.line, anchor.column) == (location.line, location.column):
                return document.with_text(apply_edits(document.text, [planned.edit]))
        logger.debug("Nothing to fix at diagnostic location", location=location)
        return document

    def fix_all(self, document: Document, project: Optional[Project] = None) -> Document:
        """Fix every non-exhaustive union match of a document"""
        fixes = self.plan(document, project)
        if not fixes:
            return document
        logger.info(f"Fixing {len(fixes)} match statement(s)", path=document.path)
        return document.with_text(apply_edits(document.text, [f.edit for f in fixes]))
