"""
Union match analyzer

Drives the exhaustiveness check over documents:

    document -> ModuleIndex -> match constructs -> check() -> Diagnostic

Each construct is checked independently against a read-only Project, so
several documents can be analyzed on worker threads at the same time. A
cancellation event is honoured between constructs, never in the middle of one.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, List, Optional, Sequence, Tuple

from .checker import Diagnostic, check, to_diagnostic
from .config import AnalyzerConfig
from .document import Document
from .logger import logger
from .pysource import ModuleIndex, Project, SourceTypeResolver, collect_constructs


class UnionSwitchAnalyzer:
    """Report match statements over unions that do not handle every variant.

    Usage:
        analyzer = UnionSwitchAnalyzer()
        for diagnostic in analyzer.analyze(Document.from_path("shapes.py")):
            print(diagnostic.format())
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or AnalyzerConfig()

    def new_project(self, documents: Iterable[Document] = ()) -> Project:
        return Project.from_documents(documents, self.config.marker_names)

    def _prepare(self, document: Document,
                 project: Optional[Project]) -> Tuple[Project, Optional[ModuleIndex]]:
        if project is None:
            project = self.new_project()
            return project, project.add_document(document)
        module = project.module_for(document)
        if module is not None:
            return project, module
        if document.path in project.failed:
            # Already reported when the project was indexed
            return project, None
        return project.with_document(document)

    def analyze(self, document: Document, project: Optional[Project] = None,
                cancel: Optional[threading.Event] = None) -> List[Diagnostic]:
        """Diagnostics for one document.

        Args:
            document: The document to check
            project: Indexed modules used to resolve imports; defaults to a
                project containing only this document
            cancel: Stops the analysis between constructs when set

        Returns:
            Diagnostics in source order
        """
        project, module = self._prepare(document, project)
        if module is None:
            return []

        resolver = SourceTypeResolver(project, module)
        diagnostics = []
        for construct in collect_constructs(module, document.path):
            if cancel is not None and cancel.is_set():
                logger.debug("Analysis cancelled", path=document.path)
                break
            report = check(construct, resolver)
            if report is not None:
                diagnostics.append(to_diagnostic(report, self.config.severity))
        return diagnostics

    def analyze_all(self, documents: Sequence[Document], project: Optional[Project] = None,
                    cancel: Optional[threading.Event] = None) -> List[Diagnostic]:
        """Analyze documents concurrently; results are sorted by location"""
        if project is None:
            project = self.new_project(documents)

        diagnostics: List[Diagnostic] = []
        max_workers = max(1, min(self.config.jobs, len(documents)))
        if max_workers == 1:
            for document in documents:
                diagnostics.extend(self.analyze(document, project, cancel))
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                futures = {
                    pool.submit(self.analyze, document, project, cancel): document
                    for document in documents
                }
                for future in as_completed(futures):
                    diagnostics.extend(future.result())

        diagnostics.sort(key=lambda d: (d.location.path, d.location.line, d.location.column))
        return diagnostics
