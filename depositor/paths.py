from __future__ import annotations

from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
LOGS_DIR = PROJECT_ROOT / "logs"


def resolve_log_file(value: str | Path | None) -> Path | None:
    """Return an absolute log path; bare file names land under ``logs/``."""
    if value is None or str(value).strip() == "":
        return None
    path = Path(value).expanduser()
    if not path.is_absolute() and path.parent == Path("."):
        path = LOGS_DIR / path
    return path.resolve()
