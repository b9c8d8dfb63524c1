"""
Clause splicing

New clauses go immediately before a trailing catch-all, otherwise at the end.
A type test placed after an unconditional wildcard would be unreachable, so the
catch-all always stays last.
"""

from typing import Sequence, Tuple

from .syntax import Clause


def insertion_index(clauses: Sequence[Clause]) -> int:
    """Index at which new clauses must be inserted"""
    if clauses and clauses[-1].is_catch_all():
        return len(clauses) - 1
    return len(clauses)


def splice(original: Sequence[Clause], new: Sequence[Clause]) -> Tuple[Clause, ...]:
    """Return original with new inserted; existing order is never changed"""
    index = insertion_index(original)
    return tuple(original[:index]) + tuple(new) + tuple(original[index:])
