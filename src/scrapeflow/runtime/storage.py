from __future__ import annotations

from pathlib import Path


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def write_bytes(path: str | Path, data: bytes) -> Path:
    """Write data to path, creating missing parent directories."""
    p = Path(path)
    ensure_dir(p.parent)
    p.write_bytes(data)
    return p
