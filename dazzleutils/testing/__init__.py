"""Testing utilities for DazzleUtils consumers."""

from .fixtures import JobRecorder, build_file_tree

__all__ = ['JobRecorder', 'build_file_tree']
