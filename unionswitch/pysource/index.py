"""
Module symbol index

Scans a parsed module once and records what the type resolver needs:

- module-level bindings: classes defined here and imported names
- classes (by qualname) with their union marker arguments, if any
- annotated names at module level and annotated attributes of classes

A Project is the set of indexed modules under analysis; it is what makes
``from shapes import Shape`` resolvable to the declaring module.

Indexing happens before any analysis runs. Afterwards indexes are only read,
so one Project can be shared by worker threads.
"""

import ast
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..config import DEFAULT_MARKER_NAMES
from ..document import Document
from ..logger import logger
from ..symbols import TypeIdentity


@dataclass(frozen=True)
class ImportBinding:
    """A name bound by an import statement.

    ``import a.b as x``      -> ImportBinding("a.b", None)
    ``from a.b import C``    -> ImportBinding("a.b", "C")
    """
    module: str
    name: Optional[str] = None


Binding = Union[TypeIdentity, ImportBinding]

# ast.TryStar only exists on 3.11+
_TRY_NODES = (ast.Try, getattr(ast, "TryStar", ast.Try))


@dataclass
class ClassInfo:
    identity: TypeIdentity
    node: ast.ClassDef
    # Raw arguments of the union marker; None when the class is not a union
    marker_args: Optional[List[ast.expr]] = None
    attribute_annotations: Dict[str, ast.expr] = field(default_factory=dict)

    @property
    def is_union(self) -> bool:
        return self.marker_args is not None


def terminal_name(node: ast.expr) -> Optional[str]:
    """Last component of a Name/Attribute chain (``a.b.union`` -> ``union``)"""
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def marker_arguments(decorator: ast.expr, marker_names: Sequence[str]) -> Optional[List[ast.expr]]:
    """Arguments of a union marker decorator, or None if it is not one"""
    if not isinstance(decorator, ast.Call):
        return None
    if terminal_name(decorator.func) not in marker_names:
        return None
    return list(decorator.args)


def first_parameter(node) -> Optional[str]:
    positional = list(node.args.posonlyargs) + list(node.args.args)
    return positional[0].arg if positional else None


def is_staticmethod(node) -> bool:
    return any(terminal_name(d) == "staticmethod" for d in node.decorator_list)


class ModuleIndex:
    """Symbols of one module"""

    def __init__(self, module_name: str, tree: ast.Module, path: str = "<unknown>",
                 marker_names: Sequence[str] = DEFAULT_MARKER_NAMES,
                 is_package: bool = False):
        self.module_name = module_name
        self.tree = tree
        self.path = path
        self.marker_names = tuple(marker_names)
        self.is_package = is_package

        self.bindings: Dict[str, Binding] = {}
        self.classes: Dict[str, ClassInfo] = {}
        self.annotations: Dict[str, ast.expr] = {}
        self.star_imports: List[str] = []

        self._scan_block(tree.body)

    def __repr__(self) -> str:
        return f"ModuleIndex({self.module_name!r}, classes={len(self.classes)})"

    @property
    def unions(self) -> List[ClassInfo]:
        return [info for info in self.classes.values() if info.is_union]

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _scan_block(self, stmts: Iterable[ast.stmt]) -> None:
        """Scan module-level statements, descending into if/try/with blocks"""
        for stmt in stmts:
            if isinstance(stmt, ast.ClassDef):
                info = self._scan_class(stmt, "")
                self.bindings[stmt.name] = info.identity
            elif isinstance(stmt, ast.Import):
                self._scan_import(stmt)
            elif isinstance(stmt, ast.ImportFrom):
                self._scan_import_from(stmt)
            elif isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
                self.annotations[stmt.target.id] = stmt.annotation
            elif isinstance(stmt, ast.If):
                self._scan_block(stmt.body)
                self._scan_block(stmt.orelse)
            elif isinstance(stmt, _TRY_NODES):
                self._scan_block(stmt.body)
                for handler in stmt.handlers:
                    self._scan_block(handler.body)
                self._scan_block(stmt.orelse)
                self._scan_block(stmt.finalbody)
            elif isinstance(stmt, (ast.With, ast.AsyncWith)):
                self._scan_block(stmt.body)

    def _scan_class(self, node: ast.ClassDef, prefix: str) -> ClassInfo:
        qualname = f"{prefix}{node.name}"
        info = ClassInfo(TypeIdentity(self.module_name, qualname), node)

        for decorator in node.decorator_list:
            args = marker_arguments(decorator, self.marker_names)
            if args is not None:
                info.marker_args = args
                break

        for stmt in node.body:
            if isinstance(stmt, ast.ClassDef):
                self._scan_class(stmt, qualname + ".")
            elif isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
                info.attribute_annotations[stmt.target.id] = stmt.annotation
            elif isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
                self._scan_method(stmt, info)

        self.classes[qualname] = info
        return info

    def _scan_method(self, node, info: ClassInfo) -> None:
        """Collect ``self.attr: T = ...`` annotations from a method body"""
        if is_staticmethod(node):
            return
        self_name = first_parameter(node)
        if self_name is None:
            return
        for child in ast.walk(node):
            if not isinstance(child, ast.AnnAssign):
                continue
            target = child.target
            if (isinstance(target, ast.Attribute) and isinstance(target.value, ast.Name)
                    and target.value.id == self_name):
                # Class-level annotations win over ones found in methods
                info.attribute_annotations.setdefault(target.attr, child.annotation)

    def _scan_import(self, node: ast.Import) -> None:
        for alias in node.names:
            if alias.asname:
                self.bindings[alias.asname] = ImportBinding(alias.name)
            else:
                # ``import a.b.c`` binds ``a``
                top = alias.name.split(".", 1)[0]
                self.bindings[top] = ImportBinding(top)

    def _scan_import_from(self, node: ast.ImportFrom) -> None:
        module = self.absolute_module(node.module, node.level)
        if module is None:
            logger.debug("Relative import escapes package", node=node, module=self.module_name)
            return
        for alias in node.names:
            if alias.name == "*":
                self.star_imports.append(module)
                continue
            self.bindings[alias.asname or alias.name] = ImportBinding(module, alias.name)

    def absolute_module(self, module: Optional[str], level: int) -> Optional[str]:
        """Resolve a (possibly relative) import target to an absolute module name"""
        if level == 0:
            return module
        package = self.module_name if self.is_package else self.module_name.rpartition(".")[0]
        parts = package.split(".") if package else []
        if level > len(parts):
            return None
        if level > 1:
            parts = parts[:len(parts) - (level - 1)]
        if module:
            parts.append(module)
        return ".".join(parts) if parts else None


def parse_document(document: Document) -> Optional[ast.Module]:
    """Parse a document; syntax errors are reported and yield None"""
    try:
        return ast.parse(document.text, filename=document.path)
    except SyntaxError as e:
        logger.error(f"Cannot parse {document.path}: {e.msg}", exc_type=SyntaxError,
                     line=e.lineno)
        return None


class Project:
    """Indexed modules of the code under analysis, keyed by module name"""

    def __init__(self, marker_names: Sequence[str] = DEFAULT_MARKER_NAMES):
        self.marker_names = tuple(marker_names)
        self._modules: Dict[str, ModuleIndex] = {}
        self.failed: List[str] = []

    @classmethod
    def from_documents(cls, documents: Iterable[Document],
                       marker_names: Sequence[str] = DEFAULT_MARKER_NAMES) -> "Project":
        project = cls(marker_names)
        for document in documents:
            project.add_document(document)
        return project

    def __contains__(self, module_name: str) -> bool:
        return module_name in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def index_document(self, document: Document) -> Optional[ModuleIndex]:
        """Build the index of a document without registering it"""
        tree = parse_document(document)
        if tree is None:
            return None
        return ModuleIndex(document.module_name, tree, document.path,
                           self.marker_names, document.is_package)

    def add_document(self, document: Document) -> Optional[ModuleIndex]:
        """Index a document and register it; None if it does not parse"""
        index = self.index_document(document)
        if index is None:
            self.failed.append(document.path)
            return None
        self._modules[document.module_name] = index
        return index

    def with_document(self, document: Document) -> Tuple["Project", Optional[ModuleIndex]]:
        """Copy of this project in which document replaces its module"""
        copy = Project(self.marker_names)
        copy._modules = dict(self._modules)
        index = copy.index_document(document)
        if index is not None:
            copy._modules[document.module_name] = index
        return copy, index

    def module(self, module_name: str) -> Optional[ModuleIndex]:
        return self._modules.get(module_name)

    def module_for(self, document: Document) -> Optional[ModuleIndex]:
        """Registered index of document, if it was indexed from the same file"""
        index = self._modules.get(document.module_name)
        if index is not None and index.path == document.path:
            return index
        return None

    def class_info(self, type_id: TypeIdentity) -> Optional[ClassInfo]:
        index = self._modules.get(type_id.module)
        if index is None:
            return None
        return index.classes.get(type_id.qualname)
