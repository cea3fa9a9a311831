"""File editing helpers for system configuration files.

All writers accept a ``dry_run`` flag and only log what they would do
when it is set.
"""

import logging
import os
import re
import shutil
from pathlib import Path
from tempfile import NamedTemporaryFile

logger = logging.getLogger(__name__)


def write_file(path: Path, content: str, *, dry_run: bool = False) -> None:
    """Write a text file atomically.

    The content is written to a temporary file in the same directory
    and moved into place with os.replace(). The temporary file is cleaned
    up on failure. Permissions of an existing file are preserved.

    Args:
        path: Destination file.
        content: Full file content.
        dry_run: If True, only log the write.

    Raises:
        OSError: If the file cannot be written.
    """
    if dry_run:
        logger.info("[dry-run] write %s", path)
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    mode = path.stat().st_mode if path.exists() else None

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            f.write(content)
        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(str(tmp_path), str(path))
    except OSError:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise
    logger.debug("Wrote %s", path)


def substitute_in_file(
    path: Path,
    pattern: str,
    replacement: str,
    *,
    dry_run: bool = False,
) -> int:
    """Apply a multiline regex substitution to a file in place.

    Args:
        path: File to edit.
        pattern: Regular expression, compiled with re.MULTILINE.
        replacement: Replacement string (may use group references).
        dry_run: If True, only count the matches.

    Returns:
        Number of substitutions made (or that would be made).

    Raises:
        OSError: If the file cannot be read or written.
    """
    text = path.read_text(encoding="utf-8")
    new_text, count = re.subn(pattern, replacement, text, flags=re.MULTILINE)
    if count and new_text != text:
        write_file(path, new_text, dry_run=dry_run)
    logger.debug("%d substitution(s) of %r in %s", count, pattern, path)
    return count


def replace_tagged_lines(
    path: Path,
    lines: list[str],
    tag: str,
    *,
    dry_run: bool = False,
) -> None:
    """Replace every line carrying a sentinel comment with new tagged lines.

    Lines containing ``tag`` are removed, then ``lines`` are appended,
    each suffixed with `` <tag>``.

    Args:
        path: File to edit (created if missing).
        lines: New lines to append.
        tag: Sentinel comment, e.g. ``#TARBS``.
        dry_run: If True, only log the change.

    Raises:
        OSError: If the file cannot be read or written.
    """
    existing = path.read_text(encoding="utf-8").splitlines() if path.exists() else []
    kept = [line for line in existing if tag not in line]
    kept.extend(f"{line} {tag}" for line in lines)
    write_file(path, "\n".join(kept) + "\n", dry_run=dry_run)


def force_symlink(target: Path, link: Path, *, dry_run: bool = False) -> None:
    """Create ``link`` pointing at ``target``, replacing whatever is there.

    Args:
        target: Path the link points to.
        link: Path of the symlink.
        dry_run: If True, only log the change.

    Raises:
        OSError: If the link cannot be created.
    """
    if dry_run:
        logger.info("[dry-run] ln -sf %s %s", target, link)
        return

    link.parent.mkdir(parents=True, exist_ok=True)
    tmp_link = link.with_name(f".{link.name}.tmp")
    if tmp_link.is_symlink() or tmp_link.exists():
        tmp_link.unlink()
    tmp_link.symlink_to(target)
    os.replace(str(tmp_link), str(link))
    logger.debug("Linked %s -> %s", link, target)


def merge_tree(source: Path, destination: Path) -> None:
    """Copy ``source`` into ``destination``, overwriting on conflict.

    Files present in both trees are replaced by the source copy, files
    only present in the destination are left alone. A destination symlink
    to a directory is followed when a source directory lands on it.
    The ``.git`` directory of a clone is copied as well.

    Args:
        source: Directory to copy from.
        destination: Directory to copy into (created if missing).

    Raises:
        IsADirectoryError: If a source file collides with a destination directory.
        NotADirectoryError: If a source directory collides with a destination file.
        OSError: If copying fails.
    """
    destination.mkdir(parents=True, exist_ok=True)
    for entry in source.iterdir():
        target = destination / entry.name
        target_is_dir = target.is_dir() and not target.is_symlink()
        if entry.is_dir() and not entry.is_symlink():
            if (target.exists() or target.is_symlink()) and not target.is_dir():
                msg = f"Cannot overwrite non-directory {target} with directory {entry}"
                raise NotADirectoryError(msg)
            merge_tree(entry, target)
            continue
        if target_is_dir:
            msg = f"Cannot overwrite directory {target} with non-directory {entry}"
            raise IsADirectoryError(msg)
        if target.is_symlink() or target.exists():
            target.unlink()
        shutil.copy2(entry, target, follow_symlinks=False)
