"""
Command line interface

    python -m unionswitch check PATH...
    python -m unionswitch fix [--diff] PATH...

Exit codes:
    0  no diagnostics
    1  diagnostics reported (check) or files changed (fix --diff)
    2  a file could not be read or parsed
"""

import argparse
import difflib
import os
import sys
import threading
from typing import Iterator, List, Optional, Sequence, Tuple

from .analyzer import UnionSwitchAnalyzer
from .config import AnalyzerConfig
from .document import Document
from .fixer import UnionSwitchFixer
from .logger import LogLevel, logger, set_log_level

EXIT_OK = 0
EXIT_DIAGNOSTICS = 1
EXIT_ERROR = 2

_SKIP_DIRS = {".git", ".hg", ".svn", ".tox", ".venv", "venv", "__pycache__", "build", "dist"}


def iter_python_files(paths: Sequence[str]) -> Iterator[str]:
    """Yield .py files; directories are walked recursively in sorted order"""
    for path in paths:
        if os.path.isdir(path):
            for root, dirs, files in os.walk(path):
                dirs[:] = sorted(d for d in dirs if d not in _SKIP_DIRS and not d.startswith("."))
                for name in sorted(files):
                    if name.endswith(".py"):
                        yield os.path.join(root, name)
        else:
            yield path


def load_documents(paths: Sequence[str]) -> Tuple[List[Document], int]:
    """Read every file; returns (documents, number of unreadable files)"""
    documents: List[Document] = []
    errors = 0
    for path in iter_python_files(paths):
        try:
            documents.append(Document.from_path(path))
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read {path}: {e}", exc_type=OSError)
            errors += 1
    return documents, errors


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unionswitch",
        description="Check that match statements over @union types handle every variant",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("paths", nargs="+", metavar="PATH",
                        help="Python files or directories to analyze")
    common.add_argument("-j", "--jobs", type=int, default=None,
                        help="Number of worker threads (default: CPU count)")
    common.add_argument("--marker", action="append", dest="markers", metavar="NAME",
                        help="Decorator name that declares a union (repeatable, default: union)")
    verbosity = common.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only report errors")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("check", parents=[common], help="Report non-exhaustive union matches")
    fix = commands.add_parser("fix", parents=[common], help="Add the missing cases")
    fix.add_argument("--diff", action="store_true",
                     help="Print a unified diff instead of rewriting files")
    return parser


def config_from_args(args: argparse.Namespace, environ=None) -> AnalyzerConfig:
    config = AnalyzerConfig.from_env(environ)
    log_level = None
    if args.verbose:
        log_level = LogLevel.DEBUG
    elif args.quiet:
        log_level = LogLevel.ERROR
    jobs = max(1, args.jobs) if args.jobs is not None else None
    return config.override(marker_names=args.markers, jobs=jobs, log_level=log_level)


def run_check(documents: List[Document], config: AnalyzerConfig, out) -> int:
    analyzer = UnionSwitchAnalyzer(config)
    project = analyzer.new_project(documents)
    diagnostics = analyzer.analyze_all(documents, project, cancel=threading.Event())
    for diagnostic in diagnostics:
        print(diagnostic.format(), file=out)
    if project.failed:
        return EXIT_ERROR
    return EXIT_DIAGNOSTICS if diagnostics else EXIT_OK


def run_fix(documents: List[Document], config: AnalyzerConfig, show_diff: bool, out) -> int:
    analyzer = UnionSwitchAnalyzer(config)
    fixer = UnionSwitchFixer(config)
    project = analyzer.new_project(documents)

    changed = 0
    for document in documents:
        if project.module_for(document) is None:
            # Did not parse
            continue
        fixed = fixer.fix_all(document, project)
        if fixed is document:
            continue
        changed += 1
        if show_diff:
            diff = difflib.unified_diff(
                document.text.splitlines(keepends=True),
                fixed.text.splitlines(keepends=True),
                fromfile=document.path,
                tofile=document.path,
            )
            out.write("".join(diff))
        else:
            fixed.write()
            logger.info(f"Fixed {document.path}")

    if project.failed:
        return EXIT_ERROR
    if show_diff and changed:
        return EXIT_DIAGNOSTICS
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None, out=None) -> int:
    out = out or sys.stdout
    args = build_parser().parse_args(argv)
    try:
        config = config_from_args(args)
    except ValueError as e:
        logger.error(str(e), exc_type=ValueError)
        return EXIT_ERROR
    set_log_level(config.log_level)

    documents, read_errors = load_documents(args.paths)
    if args.command == "check":
        status = run_check(documents, config, out)
    else:
        status = run_fix(documents, config, args.diff, out)
    return EXIT_ERROR if read_errors else status
