# -*- coding: utf-8 -*-
"""
Workspace File System - File primitives used by the installer.

Every operation either succeeds or raises FileSystemError; a failing
stat is reported as "does not exist".

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-02-06

Modified
--------
2026-02-06
"""

# Standard library
import shutil
from pathlib import Path
from typing import Union

# Artifact Hub internal
from arthub.catalog.exceptions import FileSystemError

PathLike = Union[str, Path]


class LocalFileSystem:
    """File operations against the local disk."""

    def exists(self, path: PathLike) -> bool:
        try:
            Path(path).stat()
        except OSError:
            return False
        return True

    def create_directory(self, path: PathLike) -> None:
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileSystemError(str(path), e.strerror or str(e)) from e

    def write_text(self, path: PathLike, content: str) -> None:
        try:
            Path(path).write_text(content, encoding='utf-8')
        except OSError as e:
            raise FileSystemError(str(path), e.strerror or str(e)) from e

    def delete(self, path: PathLike, recursive: bool = False) -> None:
        """Delete a file, or a directory when ``recursive`` is set."""
        target = Path(path)
        try:
            if target.is_dir() and not target.is_symlink():
                if not recursive:
                    raise FileSystemError(
                        str(path), "is a directory (recursive delete required)"
                    )
                shutil.rmtree(target)
            else:
                target.unlink()
        except OSError as e:
            raise FileSystemError(str(path), e.strerror or str(e)) from e
