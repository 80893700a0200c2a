"""Path-addressed access to nested dicts and lists.

A key path is a tuple of string/integer keys locating a value inside a
structure of nested mappings and lists. Every function here accepts either
such a tuple or a dotted/bracketed path expression (``"a.b[0]['x-y']"``),
normalizes it once through :func:`to_path` and then only works on keys.

Resolution never fails on missing intermediate segments; they are simply
absent. Mutating helpers change the target object in place.
"""

import re
from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, Iterable, Optional, Tuple, Union

Key = Union[str, int]
KeyPath = Tuple[Key, ...]
PathLike = Union[str, int, Iterable[Key]]

_MISSING = object()

_PATH_TOKEN_RE = re.compile(r"""
      (?P<name>[^.\[\]]+)                      # bare segment: a
    | \[(?P<index>\d+)\]                       # index segment: [0]
    | \[(?P<bare>[^\]'"]+)\]                  # unquoted key segment: [b]
    | \[(?P<quote>["'])(?P<quoted>.*?)(?P=quote)\]   # quoted segment: ['x-y']
    | (?P<dot>\.)                              # separator
""", re.VERBOSE)

_NON_WORD_RE = re.compile(r'\W', re.ASCII)


def to_path(path: PathLike) -> KeyPath:
    """Normalize a path expression into a key path tuple.

    Args:
        path: Dotted/bracketed string, a single int key, or an iterable of keys

    Returns:
        Tuple of keys. Bracketed integers become ``int`` keys, everything
        else parsed from a string stays ``str``. Unquoted bracket keys
        (``a[b]``) are read like quoted ones.

    Raises:
        ValueError: If a string expression cannot be tokenized
    """
    if isinstance(path, tuple):
        return path
    if isinstance(path, int):
        return (path,)
    if not isinstance(path, str):
        return tuple(path)

    keys = []
    pos = 0
    while pos < len(path):
        match = _PATH_TOKEN_RE.match(path, pos)
        if match is None:
            raise ValueError(f"Invalid path expression {path!r} at position {pos}")
        if match.group('name') is not None:
            keys.append(match.group('name'))
        elif match.group('index') is not None:
            keys.append(int(match.group('index')))
        elif match.group('bare') is not None:
            keys.append(match.group('bare'))
        elif match.group('quote') is not None:
            keys.append(match.group('quoted'))
        pos = match.end()
    return tuple(keys)


def field_path_to_string(field_path: Iterable[Key]) -> str:
    """Render a key path as a readable accessor expression.

    Integer keys render as ``[0]``, keys with non-word characters as
    ``['x-y']`` and all other keys as dotted segments.

    Example:
        field_path_to_string(['sections', 0, 'data-id', 'title'])
        => "sections[0]['data-id'].title"
    """
    result = ''
    for index, field_name in enumerate(field_path):
        if isinstance(field_name, str) and _NON_WORD_RE.search(field_name):
            result += f"['{field_name}']"
        elif isinstance(field_name, int) and not isinstance(field_name, bool):
            result += f"[{field_name}]"
        else:
            if index > 0:
                result += '.'
            result += str(field_name)
    return result


def _as_index(key: Any) -> Optional[int]:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if key >= 0 else None
    if isinstance(key, str) and key.isascii() and key.isdigit():
        return int(key)
    return None


def _is_container(value: Any) -> bool:
    return isinstance(value, (Mapping, list))


def _lookup(container: Any, key: Key) -> Any:
    """Return the child at ``key`` or ``_MISSING``."""
    if isinstance(container, Mapping):
        if key in container:
            return container[key]
        # Keys parsed from JSON/YAML are strings even when addressed as [0]
        if isinstance(key, int) and not isinstance(key, bool) and str(key) in container:
            return container[str(key)]
        return _MISSING
    if isinstance(container, list):
        index = _as_index(key)
        if index is not None and index < len(container):
            return container[index]
    return _MISSING


def _assign(container: Any, key: Key, value: Any) -> None:
    if isinstance(container, MutableMapping):
        if isinstance(key, int) and key not in container and str(key) in container:
            key = str(key)
        container[key] = value
    elif isinstance(container, list):
        index = _as_index(key)
        if index is None:
            raise TypeError(f"Cannot use key {key!r} to assign into a list")
        if index >= len(container):
            container.extend([None] * (index + 1 - len(container)))
        container[index] = value
    else:
        raise TypeError(f"Cannot assign key {key!r} into {type(container).__name__}")


def _resolve(obj: Any, keys: KeyPath) -> Any:
    current = obj
    for key in keys:
        current = _lookup(current, key)
        if current is _MISSING:
            return _MISSING
    return current


def has_path(obj: Any, path: PathLike) -> bool:
    """Check whether every segment of ``path`` exists in ``obj``.

    A present value may be ``None``; only missing keys and out-of-range
    indexes make a path absent.
    """
    return _resolve(obj, to_path(path)) is not _MISSING


def get_path(obj: Any, path: PathLike, default: Any = None) -> Any:
    """Get the value at ``path``, or ``default`` when the path is absent."""
    value = _resolve(obj, to_path(path))
    return default if value is _MISSING else value


def set_path(obj: Any, path: PathLike, value: Any) -> Any:
    """Set the value at ``path``, creating missing intermediate containers.

    A missing (or non-container) intermediate becomes a list when the next
    key is an index and a dict otherwise. Assigning past the end of a list
    pads it with ``None``.

    Args:
        obj: Root object to mutate
        path: Location to write
        value: Value to store

    Returns:
        The root object
    """
    keys = to_path(path)
    if not keys:
        return obj

    current = obj
    for position, key in enumerate(keys[:-1]):
        child = _lookup(current, key)
        if child is _MISSING or not _is_container(child):
            child = [] if _as_index(keys[position + 1]) is not None else {}
            _assign(current, key, child)
        current = child
    _assign(current, keys[-1], value)
    return obj


def unset_path(obj: Any, path: PathLike) -> bool:
    """Delete the last key of ``path`` from its parent container.

    Deleting a list index removes the element, shifting later ones.

    Returns:
        True if something was deleted, False if the path was absent or empty
    """
    keys = to_path(path)
    if not keys:
        return False
    parent = _resolve(obj, keys[:-1])
    if parent is _MISSING or _lookup(parent, keys[-1]) is _MISSING:
        return False

    last_key = keys[-1]
    if isinstance(parent, Mapping):
        if last_key not in parent:
            last_key = str(last_key)
        del parent[last_key]
    else:
        del parent[_as_index(last_key)]
    return True


def get_first(obj: Any, paths: Union[str, Iterable[PathLike]], default: Any = None) -> Any:
    """Get the value at the first of ``paths`` that is present.

    Args:
        obj: Object to read
        paths: A single path expression or an iterable of paths
        default: Returned when none of the paths is present

    Returns:
        The first present value, or ``default``
    """
    if isinstance(paths, (str, int)):
        paths = [paths]
    for path in paths:
        value = _resolve(obj, to_path(path))
        if value is not _MISSING:
            return value
    return default


def append(obj: Any, path: PathLike, value: Any) -> None:
    """Append ``value`` to the list at ``path``.

    A missing path is initialized with an empty list first.

    Raises:
        TypeError: If the existing value at ``path`` is not a list
    """
    keys = to_path(path)
    if not has_path(obj, keys):
        set_path(obj, keys, [])
    target = get_path(obj, keys)
    if not isinstance(target, list):
        raise TypeError(f"Cannot append to {type(target).__name__} at {field_path_to_string(keys)}")
    target.append(value)


def concat(obj: Any, path: PathLike, value: Any) -> None:
    """Concatenate ``value`` with the list at ``path``.

    Lists and tuples are flattened one level, any other value is added as
    a single element. A missing path is initialized with an empty list.
    The concatenated result is stored back at ``path`` as a new list.

    Raises:
        TypeError: If the existing value at ``path`` is not a list
    """
    keys = to_path(path)
    if not has_path(obj, keys):
        set_path(obj, keys, [])
    target = get_path(obj, keys)
    if not isinstance(target, list):
        raise TypeError(f"Cannot concat to {type(target).__name__} at {field_path_to_string(keys)}")
    extra = list(value) if isinstance(value, (list, tuple)) else [value]
    set_path(obj, keys, target + extra)


def copy(
    source: Any,
    source_path: PathLike,
    target: Any,
    target_path: PathLike,
    transform: Optional[Callable[[Any], Any]] = None
) -> None:
    """Copy the value at ``source_path`` into ``target`` at ``target_path``.

    Nothing happens when ``source_path`` is absent. The value is passed
    through ``transform`` first when one is given.
    """
    value = _resolve(source, to_path(source_path))
    if value is _MISSING:
        return
    if transform is not None:
        value = transform(value)
    set_path(target, target_path, value)


def copy_if_not_set(
    source: Any,
    source_path: PathLike,
    target: Any,
    target_path: PathLike,
    transform: Optional[Callable[[Any], Any]] = None
) -> None:
    """Like :func:`copy`, but only fills ``target_path`` when it is absent."""
    if not has_path(target, target_path):
        copy(source, source_path, target, target_path, transform)


def rename(obj: Any, old_path: PathLike, new_path: PathLike) -> None:
    """Move the value at ``old_path`` to ``new_path``.

    Does nothing when ``old_path`` is absent. The root itself (an empty
    ``old_path``) is never deleted.
    """
    old_keys = to_path(old_path)
    value = _resolve(obj, old_keys)
    if value is _MISSING:
        return
    set_path(obj, new_path, value)
    if old_keys:
        unset_path(obj, old_keys)
