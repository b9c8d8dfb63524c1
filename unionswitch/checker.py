"""
Exhaustiveness checker

Composes the variant registry and the coverage extractor:

    missing = declared variants - covered types   (declared order)

A construct whose scrutinee type is unknown or not a union is simply not
applicable; nothing here raises.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .coverage import extract_coverage
from .logger import logger
from .registry import VariantSet, union_info
from .symbols import TypeIdentity, TypeResolver
from .syntax import BranchingConstruct, Location


DIAGNOSTIC_ID = "UNION001"
MESSAGE_FORMAT = "Match on union '{union}' does not handle: {missing}"


class Severity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class MissingTypeReport:
    """Variants not covered by a construct, anchored at its keyword"""
    union: TypeIdentity
    missing: Tuple[TypeIdentity, ...]
    anchor: Location

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(t.name for t in self.missing)

    @property
    def display(self) -> str:
        return ", ".join(self.names)


@dataclass(frozen=True)
class Diagnostic:
    """Diagnostic record handed to the host"""
    code: str
    severity: Severity
    location: Location
    message: str
    arguments: Tuple[str, ...]

    def format(self) -> str:
        return f"{self.location}: {self.code} {self.message}"


def find_missing(construct: BranchingConstruct,
                 resolver: TypeResolver) -> Optional[Tuple[VariantSet, Tuple[TypeIdentity, ...]]]:
    """Resolve the union of a construct and compute its unhandled variants.

    Returns None when the construct does not match on a union. The returned
    tuple may be empty when every variant is handled.
    """
    scrutinee_type = resolver.resolve_static_type(construct.scrutinee)
    if scrutinee_type is None:
        logger.debug("Scrutinee type unresolved, skipping", line=construct.anchor.line)
        return None

    variants = union_info(scrutinee_type, resolver)
    if variants is None:
        return None

    coverage = extract_coverage(construct, resolver)
    missing = tuple(v for v in variants if not coverage.covers(v, resolver))
    logger.debug("Union match coverage", union=variants.union,
                 covered=len(coverage.covered), missing=len(missing),
                 catch_all=coverage.has_catch_all,
                 line=construct.anchor.line)
    return variants, missing


def check(construct: BranchingConstruct, resolver: TypeResolver) -> Optional[MissingTypeReport]:
    """Report the unhandled variants of a union match, if any"""
    found = find_missing(construct, resolver)
    if found is None:
        return None
    variants, missing = found
    if not missing:
        return None
    return MissingTypeReport(variants.union, missing, construct.anchor)


def to_diagnostic(report: MissingTypeReport, severity: Severity = Severity.WARNING) -> Diagnostic:
    message = MESSAGE_FORMAT.format(union=report.union.name, missing=report.display)
    return Diagnostic(
        code=DIAGNOSTIC_ID,
        severity=severity,
        location=report.anchor,
        message=message,
        arguments=report.names,
    )
