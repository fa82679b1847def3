"""
Bundling of build outputs into a single archive.

The archive holds ``metadata.json`` and every shared object at its root.
"""

import logging
import zipfile
from pathlib import Path
from typing import List

from codeckit.build.manifest import MANIFEST_FILENAME

logger = logging.getLogger(__name__)

ARCHIVE_PREFIX = "safe-core"


def archive_name(abi: str) -> str:
    """Deterministic archive file name for an ABI."""
    return f"{ARCHIVE_PREFIX}-{abi}.zip"


def collect_artifacts(lib_dir: Path) -> List[Path]:
    """Manifest first, then shared objects sorted by name."""
    files = sorted(p for p in lib_dir.glob("*.so") if p.is_file())
    manifest = lib_dir / MANIFEST_FILENAME
    if manifest.is_file():
        files.insert(0, manifest)
    return files


def package_artifacts(lib_dir: Path, archive_path: Path) -> List[str]:
    """
    Replace ``archive_path`` with a zip of the library directory outputs.

    Args:
        lib_dir: Directory containing the shared objects and manifest
        archive_path: Destination archive

    Returns:
        Archive member names, in write order
    """
    if archive_path.exists():
        logger.debug(f"Removing previous archive: {archive_path}")
        archive_path.unlink()

    archive_path.parent.mkdir(parents=True, exist_ok=True)

    members = []
    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for path in collect_artifacts(lib_dir):
            zf.write(path, arcname=path.name)
            members.append(path.name)

    logger.info(f"Packaged {len(members)} files into {archive_path}")
    return members
