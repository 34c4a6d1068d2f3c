from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from .shapes import ResolvedShape, to_plain


class Classification(str, Enum):
    NOT_A_COMPONENT = "not_a_component"
    DIRECT_COMPONENT = "direct_component"
    FORWARD_REF_COMPONENT = "forward_ref_component"

    @property
    def is_component(self) -> bool:
        return self is not Classification.NOT_A_COMPONENT


@dataclass(slots=True)
class FileReport:
    path: Path
    components: Dict[str, ResolvedShape] = field(default_factory=dict)
    skipped: int = 0
    error: Optional[str] = None  # set when the whole file failed

    @property
    def failed(self) -> bool:
        return self.error is not None

    def result(self) -> Dict[str, Any]:
        """Component name -> plain-encoded props shape."""
        return {name: to_plain(shape) for name, shape in self.components.items()}

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "result": self.result(),
            "skippedCount": self.skipped,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload
