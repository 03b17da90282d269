from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Protocol, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


class FsOps(Protocol):
    """The two mutations a merge performs."""

    def mkdir(self, path: Path) -> None:
        ...

    def move(self, src: Path, dst: Path) -> None:
        ...


class LocalFsOps:
    def mkdir(self, path: Path) -> None:
        os.mkdir(path)

    def move(self, src: Path, dst: Path) -> None:
        shutil.move(str(src), str(dst))


@dataclass(frozen=True)
class PrivilegedFsOps:
    """Runs mkdir/mv through an elevation prefix (the legacy tree is not ours)."""

    sudo: Sequence[str] = ("sudo",)

    def mkdir(self, path: Path) -> None:
        run_cmd([*self.sudo, "mkdir", "--", str(path)])

    def move(self, src: Path, dst: Path) -> None:
        run_cmd([*self.sudo, "mv", "--", str(src), str(dst)])


class DryRunFsOps:
    def mkdir(self, path: Path) -> None:
        logger.info("Would create directory %s", path)

    def move(self, src: Path, dst: Path) -> None:
        logger.info("Would move %s -> %s", src, dst)


@dataclass
class MergeResult:
    created: List[str] = field(default_factory=list)
    moved: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.created or self.moved)


def _raise(err: OSError) -> None:
    raise err


def merge_folders(src: str | Path, dest: str | Path, *, ops: FsOps | None = None) -> MergeResult:
    """Merge the tree at src into dest without overwriting anything in dest.

    - Walks src top-down, so a directory is handled before its children.
    - A directory missing from dest is created (non-recursively); one that
      already exists is reused.
    - A file (or symlink) missing from dest is moved there; anything already
      at the destination path wins and the source entry is left in place.
    - A source directory whose destination is occupied by a non-directory is
      skipped along with everything below it.

    Re-running with an unchanged src is a no-op.
    """

    src = Path(src)
    dest = Path(dest)
    ops = ops or LocalFsOps()
    result = MergeResult()

    if not src.is_dir():
        logger.debug("Nothing to merge: %s is not a directory", src)
        return result

    for root, dirnames, filenames in os.walk(src, topdown=True, onerror=_raise):
        root_path = Path(root)
        rel_root = root_path.relative_to(src)

        descend: List[str] = []
        for name in sorted(dirnames):
            item = root_path / name
            rel = rel_root / name
            target = dest / rel

            if item.is_symlink():
                _merge_file(item, target, str(rel), ops, result)
                continue

            if not os.path.lexists(target):
                ops.mkdir(target)
                result.created.append(str(rel))
                descend.append(name)
            elif target.is_dir():
                descend.append(name)
            else:
                logger.warning("Skipping %s: %s exists and is not a directory", item, target)
                result.skipped.append(str(rel))

        # Prune in place so os.walk only enters directories that exist in dest.
        dirnames[:] = descend

        for name in sorted(filenames):
            item = root_path / name
            rel = rel_root / name
            _merge_file(item, dest / rel, str(rel), ops, result)

    logger.info(
        "Merged %s into %s: %d dirs created, %d files moved, %d skipped",
        src,
        dest,
        len(result.created),
        len(result.moved),
        len(result.skipped),
    )
    return result


def _merge_file(item: Path, target: Path, rel: str, ops: FsOps, result: MergeResult) -> None:
    if not (item.is_symlink() or item.is_file()):
        logger.debug("Skipping special file %s", item)
        result.skipped.append(rel)
        return

    if os.path.lexists(target):
        result.skipped.append(rel)
        return

    ops.move(item, target)
    result.moved.append(rel)
