"""DazzleUtils - General purpose data utilities.

DazzleUtils bundles small helpers for working with nested data and files:
path-addressed access to nested dicts and lists, deep tree mapping, a
YAML/JSON/TOML/Markdown-frontmatter codec, and async helpers for
sequential iteration, throttled job queues and directory scans.

Choose your implementation:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Synchronous (pure computation):
    from dazzleutils import map_deep, get_path, parse_data_by_file_path

Asynchronous (anything that awaits):
    from dazzleutils.aio import TaskQueue, map_async, read_dir_recursively
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from . import aio

from .config import (
    TraversalOrder,
    MapDeepConfig,
    TaskQueueConfig,
    ReadDirConfig,
)
from .errors import (
    DazzleUtilsError,
    UnsupportedFormatError,
    TaggedAssertionError,
)
from .paths import (
    KeyPath,
    to_path,
    field_path_to_string,
    has_path,
    get_path,
    set_path,
    unset_path,
    get_first,
    append,
    concat,
    copy,
    copy_if_not_set,
    rename,
)
from .tree import map_deep
from .assertions import fail_function_with_tag, assert_function_with_fail
from .formats import (
    FrontMatterDocument,
    parse_data_by_file_path,
    stringify_data_by_file_path,
    parse_markdown_with_front_matter,
)

__all__ = [
    "__version__",
    "aio",
    # Configuration
    "TraversalOrder",
    "MapDeepConfig",
    "TaskQueueConfig",
    "ReadDirConfig",
    # Errors
    "DazzleUtilsError",
    "UnsupportedFormatError",
    "TaggedAssertionError",
    # Object paths
    "KeyPath",
    "to_path",
    "field_path_to_string",
    "has_path",
    "get_path",
    "set_path",
    "unset_path",
    "get_first",
    "append",
    "concat",
    "copy",
    "copy_if_not_set",
    "rename",
    # Trees
    "map_deep",
    # Assertions
    "fail_function_with_tag",
    "assert_function_with_fail",
    # Formats
    "FrontMatterDocument",
    "parse_data_by_file_path",
    "stringify_data_by_file_path",
    "parse_markdown_with_front_matter",
]
