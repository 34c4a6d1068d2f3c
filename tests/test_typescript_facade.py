import pytest

from propshape.facade.base import DeclarationKind, SourceLoadError, TypeResolutionError

from conftest import fixture_path


def _props(type_node):
    return {name: prop.text for name, prop in type_node.properties()}


def test_exported_declarations_in_source_order(project):
    unit = project.load(fixture_path("plain.ts"))
    declarations = unit.exported_declarations()

    assert [d.name for d in declarations] == ["VERSION", "Options", "Mode", "noop", "double", "shout"]
    kinds = {d.name: d.kind for d in declarations}
    assert kinds["VERSION"] is DeclarationKind.VARIABLE
    assert kinds["Options"] is DeclarationKind.OTHER
    assert kinds["Mode"] is DeclarationKind.OTHER
    assert kinds["noop"] is DeclarationKind.FUNCTION
    assert kinds["shout"] is DeclarationKind.VARIABLE


def test_default_and_clause_exports(unit_from):
    unit = unit_from(
        """
        function Hidden(props: { a: string }) { return null; }
        const Inner = (props: { b: number }) => null;
        export { Inner as Outer, Hidden };
        export default Hidden;
        """
    )

    names = [d.name for d in unit.exported_declarations()]
    assert names == ["Outer", "Hidden", "default"]


def test_reexports_follow_relative_modules(project):
    unit = project.load(fixture_path("index.ts"))

    names = [d.name for d in unit.exported_declarations()]
    assert names == ["ProfileCard", "Article"]


def test_parameters_and_object_types(project):
    unit = project.load(fixture_path("Card.tsx"))
    card = unit.exported_declarations()[0]

    params = card.parameters()
    assert [p.name for p in params] == ["props"]
    props_type = params[0].type
    assert props_type.is_object()
    assert not props_type.is_array()
    assert _props(props_type) == {"title": "string", "tags": "string[]"}

    tags = dict(props_type.properties())["tags"]
    assert tags.is_array()
    assert tags.element_type().text == "string"


def test_import_source_for_plain_and_qualified_callees(project):
    unit = project.load(fixture_path("Button.tsx"))
    by_name = {d.name: d for d in unit.exported_declarations()}

    button_callee = by_name["Button"].initializer().callee()
    assert button_callee.text == "forwardRef"
    assert button_callee.import_source() == "react"

    icon_callee = by_name["IconButton"].initializer().callee()
    assert icon_callee.text == "React.forwardRef"
    assert icon_callee.import_source() == "react"

    impostor_callee = by_name["Impostor"].initializer().callee()
    assert impostor_callee.import_source() == "not-react"


def test_call_type_arguments(project):
    unit = project.load(fixture_path("Button.tsx"))
    by_name = {d.name: d for d in unit.exported_declarations()}

    arguments = by_name["Button"].initializer().type_arguments()
    assert [a.text for a in arguments] == ["HTMLButtonElement", "ButtonProps"]
    assert by_name["Untyped"].initializer().type_arguments() == []


def test_interface_with_imported_alias_and_method(project):
    unit = project.load(fixture_path("Button.tsx"))
    by_name = {d.name: d for d in unit.exported_declarations()}
    props_type = by_name["Button"].initializer().type_arguments()[1]

    assert _props(props_type) == {
        "label": "string",
        "size": "Size",
        "onClick": "(event: MouseEvent) => void",
    }
    size = dict(props_type.properties())["size"]
    assert not size.is_object()


def test_interface_extends_and_cross_file_lookup(project):
    unit = project.load(fixture_path("Article.tsx"))
    article = unit.exported_declarations()[0]
    params = article.initializer().parameters()

    assert params[0].name == "{ title, author }"
    assert list(_props(params[0].type)) == ["title", "author", "related", "id", "className"]


def test_generic_alias_substitutes_arguments(project):
    unit = project.load(fixture_path("generics.tsx"))
    by_name = {d.name: d for d in unit.exported_declarations()}
    box = by_name["BoxView"].parameters()[0].type

    assert box.text == "Box<string>"
    assert _props(box) == {"value": "string", "items": "Array<string>"}
    items = dict(box.properties())["items"]
    assert items.is_array()
    assert items.element_type().text == "string"


def test_default_type_parameter(project):
    unit = project.load(fixture_path("generics.tsx"))
    by_name = {d.name: d for d in unit.exported_declarations()}

    assert _props(by_name["Amount"].parameters()[0].type) == {"amount": "number"}


def test_utility_types_and_intersections(project):
    unit = project.load(fixture_path("generics.tsx"))
    by_name = {d.name: d for d in unit.exported_declarations()}

    def param_type(name):
        return by_name[name].parameters()[0].type

    assert _props(param_type("IdView")) == {"id": "string", "label": "string"}
    assert list(_props(param_type("OptionalView"))) == ["id", "label", "hidden"]
    assert list(_props(param_type("StyledView"))) == ["id", "label", "hidden", "color"]
    assert not param_type("LooseView").is_object()
    assert not param_type("FlagView").is_object()


def test_generic_self_reference_renders_bound_text(unit_from):
    unit = unit_from(
        """
        interface Box<T> { value: T; inner: Box<T> }
        export function View(props: Box<string>) { return null; }
        """
    )
    box = unit.exported_declarations()[0].parameters()[0].type

    assert dict(box.properties())["inner"].text == "Box<string>"


def test_contextual_props_from_component_annotation(unit_from):
    unit = unit_from(
        """
        import React from "react";
        type Props = { title: string };
        export const Title: React.FC<Props> = ({ title }) => <h1>{title}</h1>;
        """
    )
    title = unit.exported_declarations()[0]
    params = title.initializer().parameters()

    assert params[0].type.text == "Props"
    assert params[0].type.is_object()


def test_unannotated_parameter_is_any(project):
    unit = project.load(fixture_path("plain.ts"))
    shout = {d.name: d for d in unit.exported_declarations()}["shout"]
    params = shout.initializer().parameters()

    assert params[0].type.text == "any"
    assert not params[0].type.is_object()


def test_class_heritage_type_arguments(project):
    unit = project.load(fixture_path("Legacy.tsx"))
    legacy = unit.exported_declarations()[0]

    assert legacy.name == "default"
    assert legacy.kind is DeclarationKind.CLASS
    assert [a.text for a in legacy.heritage_type_arguments()] == ["LegacyProps", "LegacyState"]


def test_class_used_as_type_exposes_public_members(unit_from):
    unit = unit_from(
        """
        class Model {
            name: string;
            private secret: string;
            static count: number;
            rename(next: string): void {}
        }
        export function View(props: Model) { return null; }
        """
    )
    model = unit.exported_declarations()[0].parameters()[0].type

    assert _props(model) == {"name": "string", "rename": "(next: string) => void"}


def test_alias_cycle_raises(unit_from):
    unit = unit_from(
        """
        type A = B;
        type B = A;
        export function View(props: { value: A }) { return null; }
        """
    )
    value = dict(unit.exported_declarations()[0].parameters()[0].type.properties())["value"]

    with pytest.raises(TypeResolutionError):
        value.is_object()


def test_interface_extending_itself_raises(unit_from):
    unit = unit_from(
        """
        interface Loop extends Loop { a: string }
        export function View(props: { value: Loop }) { return null; }
        """
    )
    value = dict(unit.exported_declarations()[0].parameters()[0].type.properties())["value"]

    with pytest.raises(TypeResolutionError):
        value.properties()


def test_missing_file_raises_source_load_error(project, tmp_path):
    with pytest.raises(SourceLoadError):
        project.load(tmp_path / "missing.ts")


def test_function_type_parameters_shadow_declarations(unit_from):
    unit = unit_from(
        """
        interface Props { a: string }
        interface Item { id: string }
        export const Arrow = <Props,>(p: { x: Props }) => null;
        export function Generic<Item>(p: { x: Item }) { return null; }
        """
    )
    by_name = {d.name: d for d in unit.exported_declarations()}

    arrow_x = dict(by_name["Arrow"].initializer().parameters()[0].type.properties())["x"]
    generic_x = dict(by_name["Generic"].parameters()[0].type.properties())["x"]

    assert arrow_x.text == "Props"
    assert not arrow_x.is_object()
    assert generic_x.text == "Item"
    assert not generic_x.is_object()


def test_unbound_alias_parameter_stays_opaque(unit_from):
    unit = unit_from(
        """
        interface Value { a: string }
        type Wrap<Value> = { inner: Value };
        export function View(props: Wrap) { return null; }
        """
    )
    inner = dict(unit.exported_declarations()[0].parameters()[0].type.properties())["inner"]

    assert inner.text == "Value"
    assert not inner.is_object()


def test_binding_leaves_string_literals_and_quoted_keys(unit_from):
    unit = unit_from(
        """
        interface W<T> { "T": T; lit: "T"; pick(key: "T", value: T): T }
        export function View(props: W<number>) { return null; }
        """
    )

    assert _props(unit.exported_declarations()[0].parameters()[0].type) == {
        "T": "number",
        "lit": '"T"',
        "pick": '(key: "T", value: number) => number',
    }


def test_self_definition_guard_is_released(unit_from, project):
    unit = unit_from(
        """
        interface Loop extends Loop { a: string }
        export function View(props: { value: Loop }) { return null; }
        """
    )
    value = dict(unit.exported_declarations()[0].parameters()[0].type.properties())["value"]

    with pytest.raises(TypeResolutionError):
        value.properties()
    assert project.resolving == set()
