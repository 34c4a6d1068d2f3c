from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from .config import Settings


def discover_sources(paths: Iterable[Path], settings: Settings) -> List[Path]:
    """Expand directories to analyzable files, keeping explicit files as given.

    Files found under a directory are sorted so runs are reproducible.
    """
    found: List[Path] = []
    seen = set()
    for raw in paths:
        path = Path(raw).expanduser()
        # explicit files are kept even if missing so the analyzer reports them
        candidates = sorted(_walk(path, settings)) if path.is_dir() else [path]
        for candidate in candidates:
            key = candidate.resolve()
            if key not in seen:
                seen.add(key)
                found.append(candidate)
    return found


def _walk(root: Path, settings: Settings) -> Iterable[Path]:
    excluded = set(settings.exclude_dirs)
    for candidate in root.rglob("*"):
        if not candidate.is_file() or candidate.suffix not in settings.extensions:
            continue
        if excluded.intersection(candidate.relative_to(root).parts[:-1]):
            continue
        if candidate.name.endswith(".d.ts") and not settings.include_declaration_files:
            continue
        yield candidate
