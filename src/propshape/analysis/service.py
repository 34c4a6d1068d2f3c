"""Drive classification, props extraction and resolution over source files."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..config import Settings
from ..facade.base import Declaration, FacadeError, FacadeRegistry
from ..facade.typescript import TypeScriptProject
from ..models.records import Classification, FileReport
from .classifier import classify
from .events import AnalysisEvent, EventKind, ProgressCallback
from .extractor import extract_props_type
from .resolver import resolve

logger = logging.getLogger(__name__)


class PropsAnalyzer:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[FacadeRegistry] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.registry = registry or build_registry()
        self.progress = progress

    # --- public API ---
    def analyze_file(self, path: Path, max_depth: Optional[int] = None) -> FileReport:
        depth = self.settings.max_depth if max_depth is None else max_depth
        path = Path(path)
        report = FileReport(path=path)
        self._emit("file_started", path)
        try:
            unit = self.registry.for_path(path).load(path)
            declarations = unit.exported_declarations()
        except (FacadeError, ValueError) as exc:
            logger.error("Unable to analyze %s: %s", path, exc)
            report.error = str(exc)
            self._emit("file_failed", path, message=report.error)
            return report

        logger.debug("Exported declarations in %s: %s", path, ", ".join(d.name for d in declarations))
        for declaration in declarations:
            try:
                self._process(declaration, depth, report)
            except Exception as exc:
                logger.error('Error processing "%s" in file "%s": %s', declaration.name, path, exc)
                report.skipped += 1
                self._emit("declaration_failed", path, declaration.name, message=str(exc))
        self._emit(
            "file_completed",
            path,
            message=f"{len(report.components)} components, {report.skipped} skipped",
        )
        return report

    def iter_reports(
        self, paths: Iterable[Path], max_depth: Optional[int] = None
    ) -> Iterator[Tuple[Path, FileReport]]:
        """Yield each file's report as soon as it is complete."""
        for path in paths:
            yield Path(path), self.analyze_file(path, max_depth)

    def analyze_files(self, paths: Iterable[Path], max_depth: Optional[int] = None) -> Dict[Path, FileReport]:
        return dict(self.iter_reports(paths, max_depth))

    # --- helpers ---
    def _process(self, declaration: Declaration, max_depth: int, report: FileReport) -> None:
        classification = classify(declaration, self.settings)
        if classification is Classification.NOT_A_COMPONENT:
            self._skip(report, declaration, classification, "not a component")
            return
        logger.debug("Detected %s: %s", classification.value, declaration.name)

        props_type = extract_props_type(declaration, classification, self.settings)
        if props_type is None:
            self._skip(report, declaration, classification, "no props type found")
            return
        logger.debug("Extracted props type for %s: %s", declaration.name, props_type.text)

        report.components[declaration.name] = resolve(props_type, max_depth)
        self._emit(
            "declaration_resolved",
            report.path,
            declaration.name,
            message=props_type.text,
            classification=classification,
        )

    def _skip(
        self,
        report: FileReport,
        declaration: Declaration,
        classification: Classification,
        reason: str,
    ) -> None:
        report.skipped += 1
        self._emit("declaration_skipped", report.path, declaration.name, reason, classification)

    def _emit(
        self,
        kind: EventKind,
        path: Path,
        name: Optional[str] = None,
        message: str = "",
        classification: Optional[Classification] = None,
    ) -> None:
        if self.progress is None:
            return
        self.progress(AnalysisEvent(kind, path, name, message, classification))


def build_registry() -> FacadeRegistry:
    registry = FacadeRegistry()
    registry.register(TypeScriptProject())
    return registry


def classify_file(
    path: Path,
    settings: Optional[Settings] = None,
    registry: Optional[FacadeRegistry] = None,
) -> List[Tuple[str, str, Classification]]:
    """(name, kind, classification) for every exported declaration of a file."""
    settings = settings or Settings()
    registry = registry or build_registry()
    unit = registry.for_path(Path(path)).load(Path(path))
    return [(d.name, d.kind.value, classify(d, settings)) for d in unit.exported_declarations()]
