"""Write an export bundle to disk.

Files are written into a hidden temporary directory next to the target
and renamed into place, so a reader never sees a half-written bundle.
"""

from __future__ import annotations

import json
import logging
import shutil
import tempfile
from pathlib import Path

from .models import ManufacturingExport

log = logging.getLogger(__name__)


def export_manifest(export: ManufacturingExport) -> dict:
    return {
        "order_id": export.order_id,
        "order_number": export.order_number,
        "exported_at": export.exported_at.isoformat(),
        "exported_by": export.exported_by,
        "format_version": export.format_version,
        "files": sorted(export.files),
        "layers": {name: lf.primitive_count for name, lf in export.layers.items()},
        "warnings": list(export.warnings),
    }


def write_export(export: ManufacturingExport, out_dir: Path) -> Path:
    """Write every file of *export* to ``out_dir/<order number>/``; returns that path."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    target = out_dir / export.order_number

    tmp = Path(tempfile.mkdtemp(dir=out_dir, prefix=f".{export.order_number}-"))
    old: Path | None = None
    try:
        for name, text in export.files.items():
            (tmp / name).write_text(text, encoding="utf-8")
        (tmp / "manifest.json").write_text(
            json.dumps(export_manifest(export), indent=2), encoding="utf-8",
        )

        if target.exists():
            old = Path(tempfile.mkdtemp(dir=out_dir, prefix=f".{export.order_number}-old-"))
            old.rmdir()
            target.rename(old)
        tmp.rename(target)
    except BaseException:
        shutil.rmtree(tmp, ignore_errors=True)
        # Put the previous bundle back if it was moved aside
        if old is not None and old.exists() and not target.exists():
            old.rename(target)
        raise

    if old is not None:
        shutil.rmtree(old, ignore_errors=True)
    log.info("Wrote %d files to %s", len(export.files) + 1, target)
    return target
