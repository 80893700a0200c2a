"""Factories for tagged precondition checks."""

from typing import Any, Callable, NoReturn

from .errors import TaggedAssertionError

FailFunction = Callable[[str], NoReturn]


def fail_function_with_tag(tag: str) -> FailFunction:
    """Create a ``fail(message)`` function that raises with ``[tag]`` prefixed.

    Example:
        fail = fail_function_with_tag('content-loader')
        fail('missing model')  # TaggedAssertionError: [content-loader] missing model
    """
    def fail(message: str) -> NoReturn:
        raise TaggedAssertionError(tag, message)

    return fail


def assert_function_with_fail(fail: Callable[[str], Any]) -> Callable[[Any, str], None]:
    """Create an ``assert_(value, message)`` that calls ``fail`` on falsy values."""
    def assert_(value: Any, message: str) -> None:
        if not value:
            fail(message)

    return assert_
