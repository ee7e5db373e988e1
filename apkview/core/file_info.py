#!/usr/bin/env python3
"""
File Info Module
Reads a package from disk and computes its content digests
"""

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Tuple, Union

APK_SUFFIX = ".apk"
CHUNK_SIZE = 1024 * 1024

logger = logging.getLogger(__name__)


@dataclass
class FileInfo:
    """Data class describing the selected package file"""
    name: str = ""
    size_bytes: int = 0
    last_modified: str = ""
    md5: str = ""
    sha1: str = ""
    sha256: str = ""

    @property
    def size_kb(self) -> str:
        return f"{self.size_bytes / 1024:.2f} KB"


def is_apk_name(name: str) -> bool:
    return name.lower().endswith(APK_SUFFIX)


def compute_hashes(data: bytes) -> Dict[str, str]:
    """
    Compute MD5, SHA-1 and SHA-256 over the whole byte stream

    Args:
        data: Raw package bytes

    Returns:
        Dict[str, str]: Hex digests keyed by 'md5', 'sha1', 'sha256'
    """
    md5 = hashlib.md5()
    sha1 = hashlib.sha1()
    sha256 = hashlib.sha256()

    view = memoryview(data)
    for offset in range(0, len(view), CHUNK_SIZE):
        chunk = view[offset:offset + CHUNK_SIZE]
        md5.update(chunk)
        sha1.update(chunk)
        sha256.update(chunk)

    return {
        'md5': md5.hexdigest(),
        'sha1': sha1.hexdigest(),
        'sha256': sha256.hexdigest(),
    }


def read_apk(path: Union[str, Path]) -> Tuple[bytes, str, datetime]:
    """
    Read a package file

    Args:
        path: Path to the APK

    Returns:
        Tuple[bytes, str, datetime]: Raw bytes, display name, last-modified time

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file name doesn't end in .apk
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"APK file not found: {path}")
    if not is_apk_name(path.name):
        raise ValueError(f"Not an APK file: {path.name}")

    data = path.read_bytes()
    mtime = datetime.fromtimestamp(path.stat().st_mtime)
    logger.debug(f"Read {len(data)} bytes from {path.name}")
    return data, path.name, mtime


def build_file_info(data: bytes, name: str, mtime: datetime) -> FileInfo:
    """Assemble FileInfo from already-read bytes"""
    hashes = compute_hashes(data)
    return FileInfo(
        name=name,
        size_bytes=len(data),
        last_modified=mtime.strftime("%Y-%m-%d %H:%M:%S"),
        md5=hashes['md5'],
        sha1=hashes['sha1'],
        sha256=hashes['sha256'],
    )
