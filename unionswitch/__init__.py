"""
unionswitch: exhaustiveness checking for ``match`` statements over union types

A class decorated with ``@union(...)`` declares a closed set of variant types.
Every ``match`` whose subject is statically typed as such a union must handle
all variants (or end in a catch-all); otherwise diagnostic UNION001 is
reported, and the fixer can add the missing cases.

Usage:
    from unionswitch import check_source, fix_source

    for diagnostic in check_source(text, path="shapes.py"):
        print(diagnostic.format())
    fixed_text = fix_source(text)
"""

from typing import List, Optional

from .analyzer import UnionSwitchAnalyzer
from .checker import (
    DIAGNOSTIC_ID,
    Diagnostic,
    MissingTypeReport,
    Severity,
    check,
    find_missing,
    to_diagnostic,
)
from .config import AnalyzerConfig
from .coverage import Coverage, covered_types, extract_coverage
from .document import Document, module_name_for_path
from .fixer import ConstructFix, UnionSwitchFixer
from .logger import LogLevel, logger, set_log_level, set_raise_on_error
from .marker import get_union_variants, is_union, union
from .registry import VariantSet, union_info
from .splice import insertion_index, splice
from .symbols import TypeIdentity, TypeResolver
from .synthesizer import synthesize
from .syntax import (
    BranchingConstruct,
    Clause,
    ConstructShape,
    Location,
    NeutralValueBody,
    NoOpBody,
    Pattern,
    PatternKind,
)

__version__ = "0.1.0"


def check_source(text: str, path: str = "<string>", module_name: str = "__main__",
                 config: Optional[AnalyzerConfig] = None) -> List[Diagnostic]:
    """Diagnostics for a single module given as text"""
    document = Document(path, text, module_name)
    return UnionSwitchAnalyzer(config).analyze(document)


def fix_source(text: str, path: str = "<string>", module_name: str = "__main__",
               config: Optional[AnalyzerConfig] = None) -> str:
    """Text of a single module with every non-exhaustive union match fixed"""
    document = Document(path, text, module_name)
    return UnionSwitchFixer(config).fix_all(document).text


__all__ = [
    "AnalyzerConfig",
    "BranchingConstruct",
    "Clause",
    "ConstructFix",
    "ConstructShape",
    "Coverage",
    "DIAGNOSTIC_ID",
    "Diagnostic",
    "Document",
    "Location",
    "LogLevel",
    "MissingTypeReport",
    "NeutralValueBody",
    "NoOpBody",
    "Pattern",
    "PatternKind",
    "Severity",
    "TypeIdentity",
    "TypeResolver",
    "UnionSwitchAnalyzer",
    "UnionSwitchFixer",
    "VariantSet",
    "check",
    "check_source",
    "covered_types",
    "extract_coverage",
    "find_missing",
    "fix_source",
    "get_union_variants",
    "insertion_index",
    "is_union",
    "logger",
    "module_name_for_path",
    "set_log_level",
    "set_raise_on_error",
    "splice",
    "synthesize",
    "to_diagnostic",
    "union",
    "union_info",
]
