"""Archive utilities for turning a downloaded release into an executable."""
import gzip
import os
import shutil
import stat
import zipfile
from pathlib import Path

from .constants import BLOCK_SIZE


class ArchiveUtil:
    """Utility class for unpacking single-binary release archives."""

    @staticmethod
    def gunzip(archive_path: Path) -> Path:
        """
        Decompresses <name>.gz into <name> in the same directory and
        removes the archive, like `gzip -d`. Returns the new path.
        """
        archive_path = Path(archive_path)
        if archive_path.suffix != ".gz":
            raise ValueError(f"Not a .gz archive: {archive_path}")

        target = archive_path.with_suffix("")
        with gzip.open(archive_path, "rb") as src, open(target, "wb") as dst:
            shutil.copyfileobj(src, dst, BLOCK_SIZE)
        archive_path.unlink()
        return target

    @staticmethod
    def extract_member(archive_path: Path, member: str, dest_dir: Path) -> Path:
        """
        Extracts only `member` from the zip at archive_path into dest_dir,
        dropping any directory part of the member name (`unzip -j`).

        Raises:
            KeyError: If the archive has no such member
        """
        dest_dir = Path(dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)

        with zipfile.ZipFile(archive_path) as zf:
            info = ArchiveUtil._find_member(zf, member)
            target = dest_dir / Path(info.filename).name
            with zf.open(info) as src, open(target, "wb") as dst:
                shutil.copyfileobj(src, dst, BLOCK_SIZE)
        return target

    @staticmethod
    def make_executable(path: Path) -> None:
        """chmod +x; nothing to do on Windows."""
        if os.name == "nt":
            return
        mode = os.stat(path).st_mode
        os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    @staticmethod
    def _find_member(zf: zipfile.ZipFile, member: str) -> zipfile.ZipInfo:
        for info in zf.infolist():
            if not info.is_dir() and info.filename == member:
                return info
        raise KeyError(f"{member} not found in {zf.filename}")
