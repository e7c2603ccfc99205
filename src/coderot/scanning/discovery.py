"""Find source files under a root and read them into SourceFile records."""

from fnmatch import fnmatch
from pathlib import Path
from typing import List, Optional

from ..config import AnalysisConfig
from ..exceptions import InvalidPathError
from ..languages import supported_extensions
from ..logging_config import get_logger
from ..source import SourceFile

logger = get_logger(__name__)


def is_excluded(relative_path: str, patterns: List[str]) -> bool:
    """Check a relative POSIX path against glob patterns."""
    name = relative_path.rsplit("/", 1)[-1]
    return any(fnmatch(relative_path, p) or fnmatch(name, p) for p in patterns)


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") for part in relative.parts)


def read_source(path: Path, display_path: str) -> SourceFile:
    """Read one file as UTF-8; failures become a content-less SourceFile."""
    try:
        data = path.read_bytes()
    except OSError as e:
        return SourceFile(path=display_path, error=f"cannot read file: {e.strerror or e}")
    try:
        return SourceFile(path=display_path, content=data.decode("utf-8"))
    except UnicodeDecodeError:
        return SourceFile(path=display_path, error="not valid UTF-8 text")


def discover_sources(root: Path, config: Optional[AnalysisConfig] = None) -> List[SourceFile]:
    """Collect every supported source file under ``root``.

    Files are sorted by relative path so repeated runs see the same order.
    A single file may be passed as ``root``.

    Raises:
        InvalidPathError: If ``root`` does not exist.
    """
    config = config or AnalysisConfig()
    root = Path(root)
    if not root.exists():
        raise InvalidPathError(root, "path does not exist")
    if root.is_file():
        return [read_source(root, root.name)]
    if not root.is_dir():
        raise InvalidPathError(root, "not a file or directory")

    extensions = supported_extensions()
    candidates = []
    skipped = 0
    for path in root.rglob("*"):
        if not path.is_file() or path.suffix.lower() not in extensions:
            continue
        relative = path.relative_to(root)
        rel_posix = relative.as_posix()

        if not config.allow_hidden_files and _is_hidden(relative):
            skipped += 1
            continue
        if is_excluded(rel_posix, config.exclude_patterns):
            skipped += 1
            logger.debug(f"Skipped (pattern): {rel_posix}")
            continue
        try:
            size = path.stat().st_size
        except OSError as e:
            candidates.append((rel_posix, SourceFile(path=rel_posix, error=f"cannot stat: {e}")))
            continue
        if size > config.max_file_size_bytes:
            skipped += 1
            logger.debug(f"Skipped (size): {rel_posix} ({size} bytes)")
            continue
        candidates.append((rel_posix, path))

    sources = []
    for rel_posix, item in sorted(candidates, key=lambda c: c[0]):
        sources.append(item if isinstance(item, SourceFile) else read_source(item, rel_posix))

    logger.info(f"Discovered {len(sources)} source files ({skipped} skipped) under {root}")
    return sources
