"""Tree-sitter backed type-system facade for TypeScript and TSX.

This is not a type checker. Types are resolved syntactically: type
references are looked up among the unit's own interfaces, type aliases and
classes, or followed through relative imports. Anything else (ambient
types, package imports, unions, conditional types) stays a text leaf.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from .base import (
    Declaration,
    DeclarationKind,
    ExpressionNode,
    Parameter,
    SourceLoadError,
    SourceUnit,
    TextType,
    TypeNode,
    TypeResolutionError,
    TypeSystemFacade,
)
from .utils import (
    ModuleResolver,
    flatten,
    node_text,
    normalize_text,
    strip_quotes,
    substitute_type_names,
)

logger = logging.getLogger(__name__)

MAX_ALIAS_HOPS = 32

ARRAY_GENERICS = {"Array", "ReadonlyArray"}
PASS_THROUGH_UTILITIES = {"Partial", "Required", "Readonly"}
KEY_FILTER_UTILITIES = {"Pick", "Omit"}
# Component annotations whose first type argument types an untyped props parameter
CONTEXTUAL_COMPONENT_TYPES = {"FC", "FunctionComponent", "VFC", "VoidFunctionComponent"}

FUNCTION_DECLARATIONS = {
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
}
FUNCTION_EXPRESSIONS = {"arrow_function", "function_expression", "function", "generator_function"}
CLASS_DECLARATIONS = {"class_declaration", "abstract_class_declaration", "class"}
TYPE_DECLARATIONS = {
    "interface_declaration",
    "type_alias_declaration",
    "enum_declaration",
    "class_declaration",
    "abstract_class_declaration",
}
VARIABLE_DECLARATIONS = {"lexical_declaration", "variable_declaration"}
PARAMETER_NODES = {"required_parameter", "optional_parameter"}

ANY = TextType("any")


@dataclass(frozen=True, slots=True)
class ImportBinding:
    module: str
    imported: str  # "default" or "*" for default and namespace imports


class _Structure:
    __slots__ = ("kind", "element", "members")

    def __init__(
        self,
        kind: str,
        element: Optional[TypeNode] = None,
        members: Optional[List[Tuple[str, TypeNode]]] = None,
    ) -> None:
        self.kind = kind
        self.element = element
        self.members = members or []


LEAF = _Structure("leaf")


class TypeScriptProject(TypeSystemFacade):
    """Parses units on demand and caches them by resolved path."""

    language = "typescript"
    extensions = (".ts", ".tsx")

    def __init__(self) -> None:
        self._parsers = {
            ".ts": Parser(Language(tree_sitter_typescript.language_typescript())),
            ".tsx": Parser(Language(tree_sitter_typescript.language_tsx())),
        }
        self._units: Dict[Path, TypeScriptUnit] = {}
        self._modules = ModuleResolver()
        # types whose structure is being computed; a repeat means self-definition
        self.resolving: Set[Tuple[Path, int, int, str]] = set()

    def load(self, path: Path) -> "TypeScriptUnit":
        resolved = Path(path).resolve()
        unit = self._units.get(resolved)
        if unit is not None:
            return unit
        try:
            source = resolved.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceLoadError(f"Unable to read {path}: {exc}") from exc
        return self.parse_source(source, resolved)

    def parse_source(self, source: str, path: Path) -> "TypeScriptUnit":
        """Parse ``source`` as if it were the file at ``path``."""
        resolved = Path(path).resolve()
        parser = self._parsers[".tsx" if resolved.suffix == ".tsx" else ".ts"]
        source_bytes = source.encode("utf-8")
        tree = parser.parse(source_bytes)
        unit = TypeScriptUnit(self, resolved, source_bytes, tree.root_node)
        self._units[resolved] = unit
        return unit

    def resolve_module(self, importer: "TypeScriptUnit", specifier: str) -> Optional["TypeScriptUnit"]:
        target = self._modules.resolve(importer.path, specifier)
        if target is None:
            return None
        try:
            return self.load(target)
        except SourceLoadError as exc:
            logger.debug("Skipping module %s imported from %s: %s", specifier, importer.path, exc)
            return None


class TypeScriptUnit(SourceUnit):
    def __init__(self, project: TypeScriptProject, path: Path, source: bytes, root: Node) -> None:
        self.project = project
        self.path = path
        self.source = source
        self.root = root
        self.imports: Dict[str, ImportBinding] = {}
        self._types: Dict[str, Node] = {}
        self._values: Dict[str, Node] = {}
        self._exports: Optional[List[Declaration]] = None
        self._collecting = False
        self._index()

    # --- public API ---
    def text(self, node: Node) -> str:
        return node_text(node, self.source)

    def exported_declarations(self) -> List[Declaration]:
        if self._exports is None:
            if self._collecting:
                # export * cycle between modules
                return []
            self._collecting = True
            try:
                self._exports = self._collect_exports()
            finally:
                self._collecting = False
        return list(self._exports)

    def import_source(self, name: str) -> Optional[str]:
        binding = self.imports.get(name)
        return binding.module if binding else None

    def lookup_type(self, name: str) -> Optional[Tuple["TypeScriptUnit", Node]]:
        """Find the declaration a type reference written in this unit points at."""
        if "." in name:
            head, _, rest = name.partition(".")
            binding = self.imports.get(head)
            if binding is None or binding.imported != "*":
                return None
            module = self.project.resolve_module(self, binding.module)
            return module.lookup_exported_type(rest) if module else None
        local = self._types.get(name)
        if local is not None:
            return self, local
        binding = self.imports.get(name)
        if binding is None:
            return None
        module = self.project.resolve_module(self, binding.module)
        if module is None:
            return None
        return module.lookup_exported_type(binding.imported)

    def lookup_exported_type(
        self, name: str, _seen: Optional[Set[Tuple[Path, str]]] = None
    ) -> Optional[Tuple["TypeScriptUnit", Node]]:
        seen = _seen if _seen is not None else set()
        if (self.path, name) in seen:
            return None
        seen.add((self.path, name))
        if name == "default":
            return None
        local = self._types.get(name)
        if local is not None:
            return self, local
        for statement in self._export_statements():
            source = statement.child_by_field_name("source")
            clause = _first_child(statement, "export_clause")
            if clause is not None:
                for exported, local_name in self._export_specifiers(clause):
                    if exported != name:
                        continue
                    if source is not None:
                        module = self.project.resolve_module(self, strip_quotes(self.text(source)))
                        return module.lookup_exported_type(local_name, seen) if module else None
                    return self.lookup_type(local_name)
            elif source is not None and _is_star_export(statement):
                module = self.project.resolve_module(self, strip_quotes(self.text(source)))
                found = module.lookup_exported_type(name, seen) if module else None
                if found is not None:
                    return found
        return None

    # --- indexing ---
    def _index(self) -> None:
        for child in self.root.named_children:
            if child.type == "import_statement":
                self._index_import(child)
                continue
            node = child
            if child.type == "export_statement":
                node = child.child_by_field_name("declaration")
                if node is None:
                    continue
            if node.type == "ambient_declaration" and node.named_children:
                node = node.named_children[0]
            self._index_declaration(node)

    def _index_import(self, statement: Node) -> None:
        source = statement.child_by_field_name("source")
        clause = _first_child(statement, "import_clause")
        if source is None or clause is None:
            return
        module = strip_quotes(self.text(source))
        for part in clause.named_children:
            if part.type == "identifier":
                self.imports[self.text(part)] = ImportBinding(module, "default")
            elif part.type == "namespace_import":
                ident = _first_child(part, "identifier")
                if ident is not None:
                    self.imports[self.text(ident)] = ImportBinding(module, "*")
            elif part.type == "named_imports":
                for spec in part.named_children:
                    if spec.type != "import_specifier":
                        continue
                    name_node = spec.child_by_field_name("name")
                    alias_node = spec.child_by_field_name("alias")
                    if name_node is None:
                        continue
                    imported = strip_quotes(self.text(name_node))
                    local = self.text(alias_node) if alias_node is not None else imported
                    self.imports[local] = ImportBinding(module, imported)

    def _index_declaration(self, node: Node) -> None:
        if node.type in VARIABLE_DECLARATIONS:
            for declarator in node.named_children:
                name_node = declarator.child_by_field_name("name")
                if declarator.type == "variable_declarator" and name_node is not None:
                    self._values[self.text(name_node)] = declarator
            return
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        name = self.text(name_node)
        # first declaration wins for merged interfaces
        if node.type in TYPE_DECLARATIONS:
            self._types.setdefault(name, node)
        if node.type in FUNCTION_DECLARATIONS or node.type in CLASS_DECLARATIONS:
            self._values.setdefault(name, node)

    # --- exports ---
    def _export_statements(self) -> List[Node]:
        return [child for child in self.root.named_children if child.type == "export_statement"]

    def _export_specifiers(self, clause: Node) -> List[Tuple[str, str]]:
        pairs: List[Tuple[str, str]] = []
        for spec in clause.named_children:
            if spec.type != "export_specifier":
                continue
            name_node = spec.child_by_field_name("name")
            if name_node is None:
                continue
            alias_node = spec.child_by_field_name("alias")
            local = strip_quotes(self.text(name_node))
            exported = strip_quotes(self.text(alias_node)) if alias_node is not None else local
            pairs.append((exported, local))
        return pairs

    def _collect_exports(self) -> List[Declaration]:
        declarations: List[Declaration] = []
        for statement in self._export_statements():
            declarations.extend(self._declarations_for(statement))
        return declarations

    def _declarations_for(self, statement: Node) -> List[Declaration]:
        is_default = any(child.type == "default" for child in statement.children)
        declaration = statement.child_by_field_name("declaration")
        if declaration is not None:
            if declaration.type == "ambient_declaration" and declaration.named_children:
                declaration = declaration.named_children[0]
            if declaration.type in VARIABLE_DECLARATIONS:
                found: List[Declaration] = []
                for declarator in declaration.named_children:
                    if declarator.type != "variable_declarator":
                        continue
                    name_node = declarator.child_by_field_name("name")
                    # destructuring exports are not components
                    if name_node is not None and name_node.type == "identifier":
                        found.append(TypeScriptDeclaration(self, self.text(name_node), declarator))
                return found
            if is_default:
                return [TypeScriptDeclaration(self, "default", declaration)]
            name_node = declaration.child_by_field_name("name")
            if name_node is None:
                return []
            return [TypeScriptDeclaration(self, self.text(name_node), declaration)]

        value = statement.child_by_field_name("value")
        if value is not None:
            if value.type == "identifier":
                target = self._values.get(self.text(value)) or self._types.get(self.text(value))
                if target is not None:
                    return [TypeScriptDeclaration(self, "default", target)]
            return [TypeScriptDeclaration(self, "default", value)]

        source = statement.child_by_field_name("source")
        clause = _first_child(statement, "export_clause")
        if source is not None:
            module = self.project.resolve_module(self, strip_quotes(self.text(source)))
            if module is None:
                return []
            upstream = module.exported_declarations()
            if clause is not None:
                by_name = {decl.name: decl for decl in upstream}
                return [
                    by_name[local].renamed(exported)
                    for exported, local in self._export_specifiers(clause)
                    if local in by_name
                ]
            if _is_star_export(statement):
                return [decl for decl in upstream if decl.name != "default"]
            return []

        if clause is None:
            return []
        found: List[Declaration] = []
        for exported, local in self._export_specifiers(clause):
            target = self._values.get(local) or self._types.get(local)
            if target is not None:
                found.append(TypeScriptDeclaration(self, exported, target))
                continue
            binding = self.imports.get(local)
            if binding is None:
                continue
            module = self.project.resolve_module(self, binding.module)
            if module is None:
                continue
            for decl in module.exported_declarations():
                if decl.name == binding.imported:
                    found.append(decl.renamed(exported))
        return found


class TypeScriptDeclaration(Declaration):
    def __init__(self, unit: TypeScriptUnit, name: str, node: Node) -> None:
        self.unit = unit
        self.name = name
        self.node = node

    def __repr__(self) -> str:
        return f"TypeScriptDeclaration({self.name!r}, {self.node.type})"

    def renamed(self, name: str) -> "TypeScriptDeclaration":
        return TypeScriptDeclaration(self.unit, name, self.node)

    @property
    def kind(self) -> DeclarationKind:
        node_type = self.node.type
        if node_type in FUNCTION_DECLARATIONS or node_type in FUNCTION_EXPRESSIONS:
            return DeclarationKind.FUNCTION
        if node_type == "variable_declarator":
            return DeclarationKind.VARIABLE
        if node_type in CLASS_DECLARATIONS:
            return DeclarationKind.CLASS
        return DeclarationKind.OTHER

    def parameters(self) -> List[Parameter]:
        if self.kind is not DeclarationKind.FUNCTION:
            return []
        return _parameters(self.unit, self.node)

    def initializer(self) -> Optional[ExpressionNode]:
        if self.node.type != "variable_declarator":
            return None
        value = self.node.child_by_field_name("value")
        if value is None:
            return None
        return TypeScriptExpression(self.unit, value, contextual_props=self._contextual_props())

    def heritage_type_arguments(self) -> List[TypeNode]:
        if self.kind is not DeclarationKind.CLASS:
            return []
        heritage = _first_child(self.node, "class_heritage")
        extends = _first_child(heritage, "extends_clause") if heritage is not None else None
        if extends is None:
            return []
        arguments = extends.child_by_field_name("type_arguments")
        if arguments is None:
            return []
        return [TypeScriptType(self.unit, child) for child in arguments.named_children]

    def _contextual_props(self) -> Optional[TypeNode]:
        annotation = self.node.child_by_field_name("type")
        type_node = _annotated_type(annotation)
        if type_node is None or type_node.type != "generic_type":
            return None
        name_node = type_node.child_by_field_name("name")
        arguments = type_node.child_by_field_name("type_arguments")
        if name_node is None or arguments is None or not arguments.named_children:
            return None
        if self.unit.text(name_node).split(".")[-1] not in CONTEXTUAL_COMPONENT_TYPES:
            return None
        return TypeScriptType(self.unit, arguments.named_children[0])


class TypeScriptExpression(ExpressionNode):
    def __init__(self, unit: TypeScriptUnit, node: Node, contextual_props: Optional[TypeNode] = None) -> None:
        self.unit = unit
        self.node = node
        self._contextual_props = contextual_props

    def __repr__(self) -> str:
        return f"TypeScriptExpression({self.node.type}: {self.text[:40]!r})"

    @property
    def text(self) -> str:
        return normalize_text(self.unit.text(self.node))

    @property
    def is_call(self) -> bool:
        return self.node.type == "call_expression"

    @property
    def is_function_like(self) -> bool:
        return self.node.type in FUNCTION_EXPRESSIONS

    def callee(self) -> Optional[ExpressionNode]:
        if not self.is_call:
            return None
        function = self.node.child_by_field_name("function")
        return TypeScriptExpression(self.unit, function) if function is not None else None

    def type_arguments(self) -> List[TypeNode]:
        arguments = self.node.child_by_field_name("type_arguments")
        if arguments is None:
            return []
        return [TypeScriptType(self.unit, child) for child in arguments.named_children]

    def parameters(self) -> List[Parameter]:
        if not self.is_function_like:
            return []
        params = _parameters(self.unit, self.node)
        if params and self._contextual_props is not None and params[0].type is ANY:
            params[0] = Parameter(params[0].name, self._contextual_props)
        return params

    def import_source(self) -> Optional[str]:
        node = self.node
        while node.type == "member_expression":
            obj = node.child_by_field_name("object")
            if obj is None:
                return None
            node = obj
        if node.type != "identifier":
            return None
        return self.unit.import_source(self.unit.text(node))


class TypeScriptType(TypeNode):
    """A type written in a unit, with generic parameters bound by the caller."""

    def __init__(
        self,
        unit: TypeScriptUnit,
        node: Node,
        bindings: Optional[Dict[str, TypeNode]] = None,
    ) -> None:
        self.unit = unit
        self.node = node
        self.bindings = bindings or {}
        self._text: Optional[str] = None
        self._structure: Optional[_Structure] = None

    @property
    def text(self) -> str:
        if self._text is None:
            raw = substitute_type_names(self.node, self.unit.source, _bound_texts(self.bindings))
            self._text = normalize_text(raw)
        return self._text

    def is_array(self) -> bool:
        return self._resolve().kind == "array"

    def is_object(self) -> bool:
        return self._resolve().kind == "object"

    def element_type(self) -> Optional[TypeNode]:
        return self._resolve().element

    def properties(self) -> List[Tuple[str, TypeNode]]:
        return list(self._resolve().members)

    # --- resolution ---
    def _resolve(self) -> _Structure:
        if self._structure is not None:
            return self._structure
        active = self.unit.project.resolving
        key = (self.unit.path, self.node.start_byte, self.node.end_byte, self.text)
        if key in active:
            raise TypeResolutionError(f"{self.text} is defined in terms of itself")
        active.add(key)
        try:
            self._structure = _structure_of(self.unit, self.node, self.bindings)
        finally:
            active.discard(key)
        return self._structure


def _bound_texts(bindings: Dict[str, TypeNode]) -> Dict[str, str]:
    return {name: bound.text for name, bound in bindings.items()}


def _structure_of(unit: TypeScriptUnit, node: Node, bindings: Dict[str, TypeNode]) -> _Structure:
    for _ in range(MAX_ALIAS_HOPS):
        node_type = node.type
        if node_type in ("parenthesized_type", "readonly_type", "type_annotation"):
            inner = node.named_children[-1] if node.named_children else None
            if inner is None:
                return LEAF
            node = inner
            continue
        if node_type == "array_type":
            return _Structure("array", element=TypeScriptType(unit, node.named_children[0], bindings))
        if node_type == "object_type":
            if _has_mapped_clause(node):
                return LEAF
            return _Structure("object", members=_object_members(unit, node, bindings))
        if node_type == "intersection_type":
            return _intersection(unit, node, bindings)
        if node_type not in ("type_identifier", "generic_type", "nested_type_identifier"):
            return LEAF

        name, arguments = _reference(unit, node, bindings)
        if node_type == "type_identifier" and name in bindings:
            return _resolved(bindings[name])
        if name in ARRAY_GENERICS and len(arguments) == 1:
            return _Structure("array", element=arguments[0])
        if name in PASS_THROUGH_UTILITIES and len(arguments) == 1:
            return _object_or_leaf(arguments[0])
        if name in KEY_FILTER_UTILITIES and len(arguments) == 2:
            return _key_filter(name, arguments[0], arguments[1])

        target = unit.lookup_type(name)
        if target is None:
            return LEAF
        target_unit, declaration = target
        target_bindings = _bind_parameters(target_unit, declaration, arguments)
        if declaration.type == "type_alias_declaration":
            value = declaration.child_by_field_name("value")
            if value is None:
                return LEAF
            unit, node, bindings = target_unit, value, target_bindings
            continue
        if declaration.type == "interface_declaration":
            return _Structure("object", members=_interface_members(target_unit, declaration, target_bindings))
        if declaration.type in CLASS_DECLARATIONS:
            return _Structure("object", members=_class_members(target_unit, declaration, target_bindings))
        return LEAF
    raise TypeResolutionError(f"type alias chain exceeds {MAX_ALIAS_HOPS} hops")


def _resolved(type_node: TypeNode) -> _Structure:
    if type_node.is_array():
        return _Structure("array", element=type_node.element_type())
    if type_node.is_object():
        return _Structure("object", members=type_node.properties())
    return LEAF


def _object_or_leaf(type_node: TypeNode) -> _Structure:
    if type_node.is_object():
        return _Structure("object", members=type_node.properties())
    return LEAF


def _reference(unit: TypeScriptUnit, node: Node, bindings: Dict[str, TypeNode]) -> Tuple[str, List[TypeNode]]:
    if node.type == "generic_type":
        name_node = node.child_by_field_name("name")
        arguments_node = node.child_by_field_name("type_arguments")
        name = unit.text(name_node) if name_node is not None else ""
        arguments = [
            TypeScriptType(unit, child, bindings)
            for child in (arguments_node.named_children if arguments_node is not None else [])
        ]
        return normalize_text(name), arguments
    return normalize_text(unit.text(node)), []


def _bind_parameters(unit: TypeScriptUnit, declaration: Node, arguments: List[TypeNode]) -> Dict[str, TypeNode]:
    parameters = declaration.child_by_field_name("type_parameters")
    if parameters is None:
        return {}
    bound: Dict[str, TypeNode] = {}
    for index, parameter in enumerate(p for p in parameters.named_children if p.type == "type_parameter"):
        name_node = parameter.child_by_field_name("name")
        if name_node is None:
            continue
        name = unit.text(name_node)
        if index < len(arguments):
            bound[name] = arguments[index]
            continue
        default = parameter.child_by_field_name("value")
        default_type = _annotated_type(default)
        if default_type is not None:
            bound[name] = TypeScriptType(unit, default_type, dict(bound))
        else:
            # no argument and no default: the parameter stays opaque
            bound[name] = TextType(name)
    return bound


def _intersection(unit: TypeScriptUnit, node: Node, bindings: Dict[str, TypeNode]) -> _Structure:
    members: List[Tuple[str, TypeNode]] = []
    names: Set[str] = set()
    for part in flatten(node, "intersection_type"):
        part_type = TypeScriptType(unit, part, bindings)
        if not part_type.is_object():
            return LEAF
        for name, prop in part_type.properties():
            if name not in names:
                names.add(name)
                members.append((name, prop))
    return _Structure("object", members=members)


def _key_filter(name: str, base: TypeNode, keys_type: TypeNode) -> _Structure:
    if not base.is_object():
        return LEAF
    keys = _literal_keys(keys_type)
    if keys is None:
        return LEAF
    keep = (lambda key: key in keys) if name == "Pick" else (lambda key: key not in keys)
    return _Structure("object", members=[(key, prop) for key, prop in base.properties() if keep(key)])


def _literal_keys(type_node: TypeNode) -> Optional[Set[str]]:
    if not isinstance(type_node, TypeScriptType):
        return None
    node = type_node.node
    if node.type == "type_identifier" and type_node.unit.text(node) in type_node.bindings:
        return _literal_keys(type_node.bindings[type_node.unit.text(node)])
    parts = list(flatten(node, "union_type")) if node.type == "union_type" else [node]
    keys: Set[str] = set()
    for part in parts:
        if part.type != "literal_type" or not part.named_children or part.named_children[0].type != "string":
            return None
        keys.add(strip_quotes(type_node.unit.text(part.named_children[0])))
    return keys


def _object_members(unit: TypeScriptUnit, body: Node, bindings: Dict[str, TypeNode]) -> List[Tuple[str, TypeNode]]:
    members: List[Tuple[str, TypeNode]] = []
    seen: Set[str] = set()
    for member in body.named_children:
        entry = _member(unit, member, bindings)
        if entry is None or entry[0] in seen:
            continue
        seen.add(entry[0])
        members.append(entry)
    return members


def _member(unit: TypeScriptUnit, member: Node, bindings: Dict[str, TypeNode]) -> Optional[Tuple[str, TypeNode]]:
    if member.type not in ("property_signature", "method_signature"):
        return None
    name_node = member.child_by_field_name("name")
    if name_node is None:
        return None
    name = strip_quotes(unit.text(name_node))
    if member.type == "method_signature":
        return name, _function_text(unit, member, bindings)
    type_node = _annotated_type(member.child_by_field_name("type"))
    if type_node is None:
        return name, ANY
    return name, TypeScriptType(unit, type_node, bindings)


def _interface_members(
    unit: TypeScriptUnit, declaration: Node, bindings: Dict[str, TypeNode]
) -> List[Tuple[str, TypeNode]]:
    body = declaration.child_by_field_name("body")
    members = _object_members(unit, body, bindings) if body is not None else []
    names = {name for name, _ in members}
    for clause in declaration.named_children:
        if clause.type not in ("extends_type_clause", "extends_clause"):
            continue
        for base in clause.named_children:
            base_type = TypeScriptType(unit, base, bindings)
            if not base_type.is_object():
                continue
            for name, prop in base_type.properties():
                if name not in names:
                    names.add(name)
                    members.append((name, prop))
    return members


def _class_members(
    unit: TypeScriptUnit, declaration: Node, bindings: Dict[str, TypeNode]
) -> List[Tuple[str, TypeNode]]:
    body = declaration.child_by_field_name("body")
    members: List[Tuple[str, TypeNode]] = []
    if body is None:
        return members
    for member in body.named_children:
        if member.type not in ("public_field_definition", "method_definition"):
            continue
        if not _is_public_instance_member(unit, member):
            continue
        name_node = member.child_by_field_name("name")
        if name_node is None:
            continue
        name = strip_quotes(unit.text(name_node))
        if name == "constructor":
            continue
        if member.type == "method_definition":
            members.append((name, _function_text(unit, member, bindings)))
            continue
        type_node = _annotated_type(member.child_by_field_name("type"))
        members.append((name, TypeScriptType(unit, type_node, bindings) if type_node is not None else ANY))
    return members


def _is_public_instance_member(unit: TypeScriptUnit, member: Node) -> bool:
    for child in member.children:
        if child.type == "static":
            return False
        if child.type == "accessibility_modifier" and unit.text(child) != "public":
            return False
        if child.type == "private_property_identifier":
            return False
    return True


def _function_text(unit: TypeScriptUnit, node: Node, bindings: Dict[str, TypeNode]) -> TypeNode:
    replacements = _bound_texts(bindings)
    parameters = node.child_by_field_name("parameters")
    params_text = substitute_type_names(parameters, unit.source, replacements) if parameters is not None else "()"
    return_node = _annotated_type(node.child_by_field_name("return_type"))
    return_text = substitute_type_names(return_node, unit.source, replacements) if return_node is not None else "any"
    return TextType(normalize_text(f"{params_text} => {return_text}"))


def _parameters(unit: TypeScriptUnit, function: Node) -> List[Parameter]:
    single = function.child_by_field_name("parameter")
    if single is not None:
        return [Parameter(unit.text(single), ANY)]
    formal = function.child_by_field_name("parameters")
    if formal is None:
        return []
    # the function's own type parameters shadow same-named declarations
    scope = _opaque_parameters(unit, function)
    params: List[Parameter] = []
    for param in formal.named_children:
        if param.type not in PARAMETER_NODES:
            continue
        pattern = param.child_by_field_name("pattern")
        name = unit.text(pattern) if pattern is not None else unit.text(param)
        if pattern is not None and pattern.type == "this":
            continue
        type_node = _annotated_type(param.child_by_field_name("type"))
        params.append(Parameter(normalize_text(name), TypeScriptType(unit, type_node, scope) if type_node is not None else ANY))
    return params


def _opaque_parameters(unit: TypeScriptUnit, declaration: Node) -> Dict[str, TypeNode]:
    """Type parameters of ``declaration`` bound to their own names, as leaves."""
    parameters = declaration.child_by_field_name("type_parameters")
    if parameters is None:
        return {}
    scope: Dict[str, TypeNode] = {}
    for parameter in parameters.named_children:
        name_node = parameter.child_by_field_name("name") if parameter.type == "type_parameter" else None
        if name_node is not None:
            scope[unit.text(name_node)] = TextType(unit.text(name_node))
    return scope


def _annotated_type(annotation: Optional[Node]) -> Optional[Node]:
    """Unwrap ``: T`` / ``= T`` wrapper nodes to the type node itself."""
    if annotation is None:
        return None
    if annotation.type in ("type_annotation", "default_type", "omitting_type_annotation", "opting_type_annotation"):
        return annotation.named_children[0] if annotation.named_children else None
    return annotation


def _has_mapped_clause(node: Node) -> bool:
    for member in node.named_children:
        if member.type == "index_signature" and _first_child(member, "mapped_type_clause") is not None:
            return True
    return False


def _is_star_export(statement: Node) -> bool:
    return any(child.type == "*" for child in statement.children) and _first_child(statement, "namespace_export") is None


def _first_child(node: Optional[Node], node_type: str) -> Optional[Node]:
    if node is None:
        return None
    for child in node.children:
        if child.type == node_type:
            return child
    return None
