"""Type-system facade consumed by the analysis core.

The analysis code never touches a parser directly; it only asks these
interfaces for declarations, expressions and types.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


class FacadeError(Exception):
    """Base error raised by a type-system facade."""


class SourceLoadError(FacadeError):
    """Raised when a source unit cannot be read or decoded."""


class TypeResolutionError(FacadeError):
    """Raised when a type cannot be resolved to a concrete structure."""


class DeclarationKind(str, Enum):
    FUNCTION = "function"
    VARIABLE = "variable"
    CLASS = "class"
    OTHER = "other"


class TypeNode(ABC):
    @property
    @abstractmethod
    def text(self) -> str:
        """Whitespace-normalized textual rendering of the type."""

    @abstractmethod
    def is_array(self) -> bool:
        ...

    @abstractmethod
    def is_object(self) -> bool:
        ...

    @abstractmethod
    def element_type(self) -> Optional["TypeNode"]:
        ...

    @abstractmethod
    def properties(self) -> List[Tuple[str, "TypeNode"]]:
        """Named properties in declaration order."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.text!r})"


class TextType(TypeNode):
    """A type known only by its text; never decomposes."""

    def __init__(self, text: str) -> None:
        self._text = text

    @property
    def text(self) -> str:
        return self._text

    def is_array(self) -> bool:
        return False

    def is_object(self) -> bool:
        return False

    def element_type(self) -> Optional[TypeNode]:
        return None

    def properties(self) -> List[Tuple[str, TypeNode]]:
        return []


@dataclass(frozen=True, slots=True)
class Parameter:
    name: str
    type: TypeNode


class ExpressionNode(ABC):
    @property
    @abstractmethod
    def text(self) -> str:
        ...

    @property
    @abstractmethod
    def is_call(self) -> bool:
        ...

    @property
    @abstractmethod
    def is_function_like(self) -> bool:
        """True for arrow functions and function expressions."""

    @abstractmethod
    def callee(self) -> Optional["ExpressionNode"]:
        ...

    @abstractmethod
    def type_arguments(self) -> List[TypeNode]:
        ...

    @abstractmethod
    def parameters(self) -> List[Parameter]:
        ...

    @abstractmethod
    def import_source(self) -> Optional[str]:
        """Module specifier of the import that introduced this identifier."""


class Declaration(ABC):
    name: str

    @property
    @abstractmethod
    def kind(self) -> DeclarationKind:
        ...

    @abstractmethod
    def parameters(self) -> List[Parameter]:
        """Parameters of a function declaration; empty for other kinds."""

    @abstractmethod
    def initializer(self) -> Optional[ExpressionNode]:
        ...

    @abstractmethod
    def heritage_type_arguments(self) -> List[TypeNode]:
        """Type arguments of a class's ``extends`` clause."""


class SourceUnit(ABC):
    path: Path

    @abstractmethod
    def exported_declarations(self) -> List[Declaration]:
        """Exported declarations in export order."""


class TypeSystemFacade(ABC):
    language: str
    extensions: Tuple[str, ...] = ()

    @abstractmethod
    def load(self, path: Path) -> SourceUnit:
        """Parse the unit at ``path``; raises ``SourceLoadError``."""


class FacadeRegistry:
    def __init__(self) -> None:
        self._registry: dict[str, TypeSystemFacade] = {}

    def register(self, facade: TypeSystemFacade) -> None:
        for extension in facade.extensions:
            self._registry[extension] = facade

    def for_path(self, path: Path) -> TypeSystemFacade:
        try:
            return self._registry[Path(path).suffix]
        except KeyError as exc:
            raise ValueError(f"No facade registered for {path}") from exc
