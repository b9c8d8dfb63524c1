# -*- coding: utf-8 -*-
"""
Source documents

A Document is an immutable snapshot of one module's text. Fixes never modify a
document; they return a new one.
"""

import os
from dataclasses import dataclass, replace
from typing import Optional


def module_name_for_path(path: str) -> str:
    """Derive a dotted module name by walking up through package directories.

    ``src/shapes/circle.py`` -> ``shapes.circle`` when ``src/shapes`` has an
    ``__init__.py`` and ``src`` does not.
    """
    path = os.path.abspath(path)
    directory, filename = os.path.split(path)
    stem = os.path.splitext(filename)[0]
    parts = [] if stem == "__init__" else [stem]

    while os.path.isfile(os.path.join(directory, "__init__.py")):
        directory, package = os.path.split(directory)
        parts.insert(0, package)
        if not package:
            break

    return ".".join(parts) if parts else "__main__"


@dataclass(frozen=True)
class Document:
    path: str
    text: str
    module_name: str = "__main__"

    @classmethod
    def from_path(cls, path: str, module_name: Optional[str] = None) -> "Document":
        with open(path, "r", encoding="utf-8", newline="") as f:
            text = f.read()
        return cls(path, text, module_name or module_name_for_path(path))

    @property
    def is_package(self) -> bool:
        return os.path.basename(self.path) == "__init__.py"

    def with_text(self, text: str) -> "Document":
        return replace(self, text=text)

    def write(self) -> None:
        with open(self.path, "w", encoding="utf-8", newline="") as f:
            f.write(self.text)
