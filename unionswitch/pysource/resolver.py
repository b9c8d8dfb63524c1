"""
Source-level type resolver

Implements the TypeResolver interface on top of a Project of indexed modules.
Annotations and class references are evaluated statically, much like
evaluating a type annotation at compile time:

- Name:       module bindings -> star imports -> builtins
- Attribute:  module attribute, submodule or nested class
- Subscript:  the subscripted base (``list[int]`` -> list, ``Optional[X]`` -> Optional)
- String:     parsed and evaluated (forward references)

Imports are followed through the project (re-exports included); names imported
from modules outside the project get the nominal identity ``module.name``.
"""

import ast
import builtins
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from ..logger import logger
from ..symbols import TypeIdentity, TypeResolver, builtin_type
from .collector import ScopedExpression
from .index import ImportBinding, ModuleIndex, Project


# Re-export chains longer than this are treated as unresolvable (import cycles)
MAX_IMPORT_DEPTH = 32

BUILTIN_TYPE_NAMES = frozenset(
    name for name, value in vars(builtins).items() if isinstance(value, type)
)


@dataclass(frozen=True)
class ModuleRef:
    """A reference to a module (result of resolving ``import x``)"""
    name: str


Symbol = Union[TypeIdentity, ModuleRef]


class SourceTypeResolver(TypeResolver):
    """Resolve types for constructs collected from one module of a project.

    Usage:
        resolver = SourceTypeResolver(project, project.module("app.render"))
        type_id = resolver.resolve_static_type(construct.scrutinee)
    """

    def __init__(self, project: Project, module: ModuleIndex):
        self.project = project
        self.module = module

    # ------------------------------------------------------------------
    # TypeResolver interface
    # ------------------------------------------------------------------

    def resolve_static_type(self, expr: Any) -> Optional[TypeIdentity]:
        if not isinstance(expr, ScopedExpression):
            return None
        annotation = self._annotation_of(expr)
        if annotation is None:
            return None
        return self.resolve_annotation(annotation, self.module)

    def resolve_type_reference(self, ref: Any) -> Optional[TypeIdentity]:
        if isinstance(ref, TypeIdentity):
            return ref
        if not isinstance(ref, ast.expr):
            return None
        return self.resolve_annotation(ref, self.module)

    def get_marker_types(self, type_id: TypeIdentity) -> Optional[Sequence[Optional[TypeIdentity]]]:
        info = self.project.class_info(type_id)
        if info is None or info.marker_args is None:
            return None

        declaring = self.project.module(type_id.module)
        entries: List[Optional[TypeIdentity]] = []
        for arg in info.marker_args:
            variant = self.resolve_annotation(arg, declaring)
            if variant is None:
                # Variants may also be nested in the union class itself
                variant = self._nested_variant(arg, type_id)
            if variant is None:
                logger.debug("Union variant could not be resolved", node=arg, union=type_id)
            entries.append(variant)
        return entries

    # ------------------------------------------------------------------
    # Expressions and annotations
    # ------------------------------------------------------------------

    def _annotation_of(self, expr: ScopedExpression) -> Optional[ast.expr]:
        node = expr.node
        if isinstance(node, ast.Name):
            return expr.scope.lookup_annotation(node.id)

        if isinstance(node, ast.Attribute) and isinstance(node.value, ast.Name):
            method = expr.scope.enclosing_method()
            if method is not None and node.value.id == method.self_name:
                return method.class_info.attribute_annotations.get(node.attr)
        return None

    def resolve_annotation(self, node: ast.expr, module: Optional[ModuleIndex]) -> Optional[TypeIdentity]:
        """Type named by an annotation-like expression evaluated in module"""
        if module is None:
            return None
        symbol = self._resolve_symbol(node, module, 0)
        return symbol if isinstance(symbol, TypeIdentity) else None

    def _resolve_symbol(self, node: ast.expr, module: ModuleIndex, depth: int) -> Optional[Symbol]:
        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            try:
                parsed = ast.parse(node.value.strip(), mode="eval")
            except SyntaxError:
                return None
            return self._resolve_symbol(parsed.body, module, depth)

        if isinstance(node, ast.Name):
            return self.resolve_name(node.id, module, depth)

        if isinstance(node, ast.Attribute):
            base = self._resolve_symbol(node.value, module, depth)
            if base is None:
                return None
            return self._member(base, node.attr, depth)

        if isinstance(node, ast.Subscript):
            return self._resolve_symbol(node.value, module, depth)

        return None

    def resolve_name(self, name: str, module: ModuleIndex, depth: int = 0) -> Optional[Symbol]:
        """Resolve a module-level name of module"""
        if depth > MAX_IMPORT_DEPTH:
            logger.debug("Import chain too deep", name=name, module=module.module_name)
            return None

        binding = module.bindings.get(name)
        if isinstance(binding, TypeIdentity):
            return binding
        if isinstance(binding, ImportBinding):
            return self._follow_import(binding, depth + 1)

        for star_module in module.star_imports:
            target = self.project.module(star_module)
            if target is not None and name in target.bindings:
                return self.resolve_name(name, target, depth + 1)

        if name in BUILTIN_TYPE_NAMES:
            return builtin_type(name)
        return None

    def _follow_import(self, binding: ImportBinding, depth: int) -> Optional[Symbol]:
        if binding.name is None:
            return ModuleRef(binding.module)

        submodule = f"{binding.module}.{binding.name}"
        if submodule in self.project:
            return ModuleRef(submodule)

        target = self.project.module(binding.module)
        if target is not None:
            return self.resolve_name(binding.name, target, depth)

        # Outside the project: trust the import
        return TypeIdentity(binding.module, binding.name)

    def _member(self, base: Symbol, attr: str, depth: int) -> Optional[Symbol]:
        if isinstance(base, ModuleRef):
            submodule = f"{base.name}.{attr}"
            if submodule in self.project:
                return ModuleRef(submodule)
            target = self.project.module(base.name)
            if target is not None:
                return self.resolve_name(attr, target, depth + 1)
            return TypeIdentity(base.name, attr)

        nested = TypeIdentity(base.module, f"{base.qualname}.{attr}")
        if base.module in self.project and self.project.class_info(nested) is None:
            # Attribute of a known class that is not a nested class (enum member, constant)
            return None
        return nested

    def _nested_variant(self, arg: ast.expr, union: TypeIdentity) -> Optional[TypeIdentity]:
        name = arg.value if isinstance(arg, ast.Constant) and isinstance(arg.value, str) else None
        if name is None and isinstance(arg, ast.Name):
            name = arg.id
        if not name:
            return None
        candidate = TypeIdentity(union.module, f"{union.qualname}.{name.strip()}")
        if self.project.class_info(candidate) is None:
            return None
        return candidate

    # ------------------------------------------------------------------
    # Emission support
    # ------------------------------------------------------------------

    def spell(self, type_id: TypeIdentity) -> str:
        """Shortest expression that names type_id from this module.

        Falls back to the bare class name when the module has no binding that
        reaches the type.
        """
        module = self.module
        if type_id.module == module.module_name and type_id.qualname in module.classes:
            return type_id.qualname

        module_match = None
        for name in module.bindings:
            symbol = self.resolve_name(name, module)
            if isinstance(symbol, TypeIdentity) and symbol.module == type_id.module:
                if symbol.qualname == type_id.qualname:
                    return name
                if type_id.qualname.startswith(symbol.qualname + "."):
                    return name + type_id.qualname[len(symbol.qualname):]
            elif isinstance(symbol, ModuleRef) and module_match is None:
                if type_id.module == symbol.name:
                    module_match = f"{name}.{type_id.qualname}"
                elif type_id.module.startswith(symbol.name + "."):
                    module_match = f"{name}{type_id.module[len(symbol.name):]}.{type_id.qualname}"

        if module_match is not None:
            return module_match
        logger.debug("No binding reaches type, using its bare name", type=type_id,
                     module=module.module_name)
        return type_id.name
