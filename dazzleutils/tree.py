"""Deep mapping over nested dict/list trees.

Provides depth-first pre-order and post-order transformation of arbitrary
JSON-like values. The input is never mutated; a new tree is built as the
traversal unwinds.
"""

from typing import Any, Callable, List, Optional

from .config import MapDeepConfig, TraversalOrder, ensure_valid
from .paths import Key

Iteratee = Callable[[Any, List[Key], List[Any]], Any]


def is_collection(value: Any) -> bool:
    """Check if ``value`` is a node that has children (a dict or a list)."""
    return isinstance(value, (dict, list))


def map_deep(
    value: Any,
    iteratee: Iteratee,
    config: Optional[MapDeepConfig] = None,
    *,
    post_order: Optional[bool] = None,
    iterate_collections: Optional[bool] = None,
    iterate_scalars: Optional[bool] = None
) -> Any:
    """Deeply map ``value`` by calling ``iteratee`` on every node.

    The return value of every ``iteratee`` call replaces the original node.

    In pre-order (the default) the iteratee is called on a parent before its
    children, so when it replaces a dict or list, the children of the
    *replacement* are traversed. In post-order the children are mapped
    first and the iteratee receives the node with already-mapped children.

    The iteratee is invoked with three arguments: the node ``value``, the
    ``key_path`` of that node relative to the root, and the ``stack`` of
    ancestor values (root first). Each ancestor is recorded as it stands
    after its own pre-order iteratee call. The first call receives the root
    and empty lists for ``key_path`` and ``stack``.

    Example:
        map_deep({'prop': 'foo', 'arr': ['bar', 1, 2]},
                 lambda v, *_: v * 10 if isinstance(v, int) else v)
        => {'prop': 'foo', 'arr': ['bar', 10, 20]}

        map_deep({'prop': 'foo', 'arr': ['bar']},
                 lambda v, key_path, _: f"{v}__{'.'.join(map(str, key_path))}"
                 if isinstance(v, str) else v)
        => {'prop': 'foo__prop', 'arr': ['bar__arr.0']}

    Args:
        value: Root of the tree to map
        iteratee: Function (value, key_path, stack) -> new value
        config: Traversal configuration (defaults to pre-order, all nodes)
        post_order: Shortcut overriding ``config.order``
        iterate_collections: Shortcut overriding ``config.iterate_collections``
        iterate_scalars: Shortcut overriding ``config.iterate_scalars``

    Returns:
        The mapped tree
    """
    config = config or MapDeepConfig()
    if post_order is not None:
        config = MapDeepConfig(
            order=TraversalOrder.POST_ORDER if post_order else TraversalOrder.PRE_ORDER,
            iterate_collections=config.iterate_collections,
            iterate_scalars=config.iterate_scalars,
        )
    if iterate_collections is not None:
        config = MapDeepConfig(config.order, iterate_collections, config.iterate_scalars)
    if iterate_scalars is not None:
        config = MapDeepConfig(config.order, config.iterate_collections, iterate_scalars)
    ensure_valid(config)

    is_post_order = config.post_order

    def _map_deep(node: Any, key_path: List[Key], stack: List[Any]) -> Any:
        invoke = config.iterate_collections if is_collection(node) else config.iterate_scalars

        # Pre-order: transform before looking at children
        if invoke and not is_post_order:
            node = iteratee(node, key_path, stack)

        child_stack = stack + [node]
        if isinstance(node, dict):
            node = {
                key: _map_deep(child, key_path + [key], child_stack)
                for key, child in node.items()
            }
        elif isinstance(node, list):
            node = [
                _map_deep(child, key_path + [index], child_stack)
                for index, child in enumerate(node)
            ]

        # Post-order: transform after children are mapped
        if invoke and is_post_order:
            node = iteratee(node, key_path, stack)

        return node

    return _map_deep(value, [], [])
