#!/usr/bin/env python3
"""
Build an index of markdown frontmatter under a directory.

This example demonstrates:
- Recursive directory listing with a filter
- Parsing markdown documents with YAML/TOML/JSON frontmatter
- Writing the result in a format chosen by the output extension
"""

import asyncio
import os
import stat
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzleutils import get_path
from dazzleutils.aio import map_async, output_data, parse_file, read_dir_recursively


def markdown_only(file_path, stats):
    """Keep directories so they are descended into, and markdown files."""
    if stat.S_ISDIR(stats.st_mode):
        return not os.path.basename(file_path).startswith('.')
    return file_path.endswith(('.md', '.mdx', '.markdown'))


async def main():
    root_path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd()
    output_path = Path(sys.argv[2]) if len(sys.argv) > 2 else Path('frontmatter-index.json')

    print(f"Scanning: {root_path}")
    print("-" * 50)

    files = await read_dir_recursively(root_path, filter=markdown_only)

    async def describe(file_path, index, files):
        document = await parse_file(root_path / file_path)
        return {
            'file': file_path,
            'title': get_path(document.frontmatter or {}, 'title', file_path),
            'frontmatter': document.frontmatter,
        }

    entries = await map_async(files, describe)
    await output_data(output_path, {'root': str(root_path), 'documents': entries})

    print(f"Indexed {len(entries)} documents into {output_path}")


if __name__ == "__main__":
    print("DazzleUtils - Frontmatter Index Example")
    print("=" * 50)
    asyncio.run(main())
