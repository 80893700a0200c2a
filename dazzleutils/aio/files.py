"""Async filesystem helpers built on the format codec.

Blocking filesystem calls run in a worker thread through
``asyncio.to_thread``; directory entries are processed one at a time with
the sequential iteration helpers.
"""

import asyncio
import logging
import os
import stat as stat_module  # To avoid name collision with stat results
from pathlib import Path
from typing import Any, List, NamedTuple, Optional, Sequence, Union

from ..config import ReadDirConfig, ensure_valid
from ..formats import parse_data_by_file_path, stringify_data_by_file_path
from .sequential import find_async, reduce_async

logger = logging.getLogger(__name__)

PathType = Union[str, os.PathLike]


class DirEntryResult(NamedTuple):
    """Entry reported by read_dir_recursively when stats are requested."""
    file_path: str
    stats: os.stat_result


async def read_dir_recursively(
    directory: PathType,
    config: Optional[ReadDirConfig] = None,
    **options: Any
) -> List[Union[str, DirEntryResult]]:
    """List files under ``directory`` recursively.

    Entries are visited in name order, depth first. Each entry is stat'ed
    and passed to ``config.filter(file_path, stats)``; a rejected directory
    is not descended into. Entries that are neither files nor directories
    are skipped.

    Args:
        directory: Directory to scan
        config: Scan options (see ReadDirConfig)
        **options: ReadDirConfig fields, used when ``config`` is omitted

    Returns:
        Root-relative (or absolute) paths, or DirEntryResult items when
        ``include_stats`` is set
    """
    config = ensure_valid(config or ReadDirConfig(**options))
    return await _read_dir(os.fspath(directory), os.fspath(directory), config)


async def _read_dir(directory: str, root_dir: str, config: ReadDirConfig) -> List[Any]:
    names = sorted(await asyncio.to_thread(os.listdir, directory))

    async def visit(result: List[Any], name: str, index: int, names: Sequence[str]) -> List[Any]:
        abs_file_path = os.path.join(directory, name)
        file_path = (abs_file_path if config.absolute_file_paths
                     else os.path.relpath(abs_file_path, root_dir))
        stats = await asyncio.to_thread(os.stat, abs_file_path)

        if config.filter is not None and not config.filter(file_path, stats):
            return result

        item = DirEntryResult(file_path, stats) if config.include_stats else file_path
        if stat_module.S_ISDIR(stats.st_mode):
            children = await _read_dir(abs_file_path, root_dir, config)
            return result + [item] + children if config.include_dirs else result + children
        if stat_module.S_ISREG(stats.st_mode):
            return result + [item]

        logger.debug("Skipping special file %s", abs_file_path)
        return result

    return await reduce_async(names, visit, [])


async def get_first_existing_file(file_names: Sequence[str], input_dir: PathType) -> Optional[str]:
    """Return the first of ``file_names`` that exists in ``input_dir``.

    Returns:
        Absolute path of the first existing file, or None
    """
    file_paths = [os.path.abspath(os.path.join(input_dir, name)) for name in file_names]

    async def exists(file_path: str, index: int, paths: Sequence[str]) -> bool:
        return await asyncio.to_thread(os.path.exists, file_path)

    return await find_async(file_paths, exists)


async def parse_file(file_path: PathType) -> Any:
    """Read a UTF-8 file and decode it according to its extension."""
    content = await asyncio.to_thread(Path(file_path).read_text, encoding='utf-8')
    return parse_data_by_file_path(content, file_path)


async def parse_first_existing_file(file_names: Sequence[str], input_dir: PathType) -> Any:
    """Parse the first of ``file_names`` that exists in ``input_dir``.

    Returns:
        Decoded data, or None when none of the files exists
    """
    file_path = await get_first_existing_file(file_names, input_dir)
    if file_path is None:
        return None
    return await parse_file(file_path)


async def output_data(file_path: PathType, data: Any) -> None:
    """Encode ``data`` according to the extension and write it to ``file_path``.

    Parent directories are created as needed. Encoding happens before
    anything touches the filesystem.
    """
    content = stringify_data_by_file_path(data, file_path)

    def _write() -> None:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')

    await asyncio.to_thread(_write)
