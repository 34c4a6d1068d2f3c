"""Shared test fixtures for propshape tests."""
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from propshape.facade.base import TypeNode
from propshape.facade.typescript import TypeScriptProject, TypeScriptUnit

FIXTURES = Path(__file__).parent / "fixtures" / "typescript"


def fixture_path(name: str) -> Path:
    return FIXTURES / name


class FakeType(TypeNode):
    """In-memory type graph node; properties are looked up lazily by name."""

    def __init__(
        self,
        text: str,
        graph: Optional[Dict[str, "FakeType"]] = None,
        element: Optional[str] = None,
        props: Optional[List[Tuple[str, str]]] = None,
        fail: bool = False,
    ) -> None:
        self._text = text
        self.graph = graph if graph is not None else {}
        self.element = element
        self.props = props
        self.fail = fail
        self.graph.setdefault(text, self)

    @property
    def text(self) -> str:
        return self._text

    def _check(self) -> None:
        if self.fail:
            raise RuntimeError(f"cannot resolve {self._text}")

    def is_array(self) -> bool:
        self._check()
        return self.element is not None

    def is_object(self) -> bool:
        self._check()
        return self.props is not None

    def element_type(self) -> Optional[TypeNode]:
        return self._lookup(self.element) if self.element else None

    def properties(self) -> List[Tuple[str, TypeNode]]:
        return [(name, self._lookup(target)) for name, target in self.props or []]

    def _lookup(self, text: str) -> TypeNode:
        return self.graph.get(text) or FakeType(text, self.graph)


@pytest.fixture
def project() -> TypeScriptProject:
    return TypeScriptProject()


@pytest.fixture
def unit_from(tmp_path: Path, project: TypeScriptProject) -> Callable[..., TypeScriptUnit]:
    """Factory fixture: write source to a temp file and load it."""

    def _create(source: str, name: str = "component.tsx") -> TypeScriptUnit:
        path = tmp_path / name
        path.write_text(source)
        return project.load(path)

    return _create
