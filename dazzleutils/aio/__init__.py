"""Asynchronous utilities of DazzleUtils.

This package contains everything that awaits: sequential iteration over
ordered sequences, the throttled task queue with its start policies, and
filesystem helpers built on the format codec.
"""

# Sequential iteration
from .sequential import (
    for_each_async,
    map_async,
    reduce_async,
    find_async,
)

# Task queue
from .task_queue import (
    Task,
    TaskQueue,
    TaskState,
    TaskTagCounter,
)
from .start_policies import (
    StartDecision,
    StartPolicy,
    AlwaysStart,
    IntervalGate,
    LimitGate,
    PolicyPipeline,
    build_start_policy,
)

# Filesystem helpers
from .files import (
    DirEntryResult,
    read_dir_recursively,
    get_first_existing_file,
    parse_file,
    parse_first_existing_file,
    output_data,
)

__all__ = [
    # Sequential iteration
    'for_each_async',
    'map_async',
    'reduce_async',
    'find_async',
    # Task queue
    'Task',
    'TaskQueue',
    'TaskState',
    'TaskTagCounter',
    # Start policies
    'StartDecision',
    'StartPolicy',
    'AlwaysStart',
    'IntervalGate',
    'LimitGate',
    'PolicyPipeline',
    'build_start_policy',
    # Filesystem helpers
    'DirEntryResult',
    'read_dir_recursively',
    'get_first_existing_file',
    'parse_file',
    'parse_first_existing_file',
    'output_data',
]
