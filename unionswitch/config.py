"""
Analyzer configuration

Settings come from (lowest to highest priority):
1. defaults
2. environment variables (UNIONSWITCH_MARKERS, UNIONSWITCH_JOBS, UNIONSWITCH_LOG_LEVEL)
3. explicit overrides (command line flags)
"""

import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional, Tuple

from .checker import Severity
from .logger import LogLevel


DEFAULT_MARKER_NAMES = ("union",)


def _default_jobs() -> int:
    return os.cpu_count() or 4


@dataclass(frozen=True)
class AnalyzerConfig:
    """Options shared by the analyzer, the fixer and the CLI"""
    # Decorator names (last dotted component) that declare a union
    marker_names: Tuple[str, ...] = DEFAULT_MARKER_NAMES
    # Worker threads used when analyzing several documents
    jobs: int = field(default_factory=_default_jobs)
    severity: Severity = Severity.WARNING
    log_level: LogLevel = LogLevel.WARNING

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AnalyzerConfig":
        env = os.environ if environ is None else environ
        config = cls()

        markers = env.get("UNIONSWITCH_MARKERS")
        if markers:
            names = tuple(n.strip() for n in markers.split(",") if n.strip())
            if names:
                config = replace(config, marker_names=names)

        jobs = env.get("UNIONSWITCH_JOBS")
        if jobs:
            try:
                config = replace(config, jobs=max(1, int(jobs)))
            except ValueError:
                raise ValueError(f"UNIONSWITCH_JOBS must be an integer, got {jobs!r}") from None

        level = env.get("UNIONSWITCH_LOG_LEVEL")
        if level:
            config = replace(config, log_level=LogLevel.parse(level))

        return config

    def override(self, **changes) -> "AnalyzerConfig":
        """Copy with the given non-None settings applied"""
        changes = {k: v for k, v in changes.items() if v is not None}
        if "marker_names" in changes:
            changes["marker_names"] = tuple(changes["marker_names"])
        return replace(self, **changes)
