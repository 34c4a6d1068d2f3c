from propshape.analysis.classifier import classify
from propshape.analysis.extractor import extract_props_type
from propshape.config import Settings
from propshape.models.records import Classification

from conftest import fixture_path


def _by_name(unit):
    return {d.name: d for d in unit.exported_declarations()}


def test_forward_ref_from_ui_module(project):
    declarations = _by_name(project.load(fixture_path("Button.tsx")))

    assert classify(declarations["Button"]) is Classification.FORWARD_REF_COMPONENT
    assert classify(declarations["IconButton"]) is Classification.FORWARD_REF_COMPONENT
    assert classify(declarations["Untyped"]) is Classification.FORWARD_REF_COMPONENT


def test_forward_ref_from_other_module_is_not_a_component(project):
    declarations = _by_name(project.load(fixture_path("Button.tsx")))

    assert classify(declarations["Impostor"]) is Classification.NOT_A_COMPONENT
    assert classify(declarations["Renamed"]) is Classification.NOT_A_COMPONENT
    assert classify(declarations["ButtonProps"]) is Classification.NOT_A_COMPONENT


def test_configured_ui_module(unit_from):
    unit = unit_from(
        """
        import { forwardRef } from "preact/compat";
        export const Field = forwardRef<HTMLInputElement, { name: string }>((props, ref) => null);
        """
    )
    field = unit.exported_declarations()[0]

    assert classify(field) is Classification.NOT_A_COMPONENT
    assert classify(field, Settings(ui_module="preact/compat")) is Classification.FORWARD_REF_COMPONENT


def test_direct_components(project):
    card = project.load(fixture_path("Card.tsx")).exported_declarations()[0]
    article = project.load(fixture_path("Article.tsx")).exported_declarations()[0]
    legacy = project.load(fixture_path("Legacy.tsx")).exported_declarations()[0]

    assert classify(card) is Classification.DIRECT_COMPONENT
    assert classify(article) is Classification.DIRECT_COMPONENT
    assert classify(legacy) is Classification.DIRECT_COMPONENT


def test_non_components(project):
    declarations = project.load(fixture_path("plain.ts")).exported_declarations()

    assert [classify(d) for d in declarations] == [Classification.NOT_A_COMPONENT] * 6


def test_component_annotation_makes_untyped_arrow_a_component(unit_from):
    unit = unit_from(
        """
        import { FC } from "react";
        interface Props { title: string }
        export const Title: FC<Props> = ({ title }) => <h1>{title}</h1>;
        export const Bare = ({ title }) => <h1>{title}</h1>;
        """
    )
    declarations = _by_name(unit)

    assert classify(declarations["Title"]) is Classification.DIRECT_COMPONENT
    assert classify(declarations["Bare"]) is Classification.NOT_A_COMPONENT


def test_facade_failure_means_not_a_component(unit_from):
    unit = unit_from(
        """
        type A = B;
        type B = A;
        export function Looping(props: A) { return null; }
        """
    )

    assert classify(unit.exported_declarations()[0]) is Classification.NOT_A_COMPONENT


def test_extract_forward_ref_props_is_second_type_argument(project):
    declarations = _by_name(project.load(fixture_path("Button.tsx")))

    props = extract_props_type(declarations["Button"], Classification.FORWARD_REF_COMPONENT)
    assert props.text == "ButtonProps"
    inline = extract_props_type(declarations["IconButton"], Classification.FORWARD_REF_COMPONENT)
    assert inline.text == "{ icon: string }"


def test_extract_forward_ref_without_type_arguments(project):
    declarations = _by_name(project.load(fixture_path("Button.tsx")))

    assert extract_props_type(declarations["Untyped"], Classification.FORWARD_REF_COMPONENT) is None


def test_extract_forward_ref_with_single_type_argument(unit_from):
    unit = unit_from(
        """
        import { forwardRef } from "react";
        export const Half = forwardRef<HTMLDivElement>((props, ref) => null);
        """
    )

    assert extract_props_type(unit.exported_declarations()[0], Classification.FORWARD_REF_COMPONENT) is None


def test_extract_direct_props_is_first_parameter_type(project):
    card = project.load(fixture_path("Card.tsx")).exported_declarations()[0]
    article = project.load(fixture_path("Article.tsx")).exported_declarations()[0]

    assert extract_props_type(card, Classification.DIRECT_COMPONENT).text == "{ title: string; tags: string[] }"
    assert extract_props_type(article, Classification.DIRECT_COMPONENT).text == "ArticleProps"


def test_extract_class_props_from_heritage_is_opt_in(project):
    legacy = project.load(fixture_path("Legacy.tsx")).exported_declarations()[0]

    assert extract_props_type(legacy, Classification.DIRECT_COMPONENT) is None
    props = extract_props_type(
        legacy, Classification.DIRECT_COMPONENT, Settings(class_props_from_heritage=True)
    )
    assert props.text == "LegacyProps"


def test_not_a_component_has_no_props(project):
    declarations = project.load(fixture_path("plain.ts")).exported_declarations()

    assert all(extract_props_type(d, Classification.NOT_A_COMPONENT) is None for d in declarations)
