"""pytest plugin for uneval.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from typing import Any

import pytest

from uneval import EncoderConfig, to_string


@pytest.fixture(scope="session")
def assert_rust_literal() -> Any:
    """Fixture that returns a callable asserting the exact rendering of a value.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to to_string() which creates a fresh Encoder per call).

    Usage in tests::

        def test_point(assert_rust_literal):
            assert_rust_literal(Point(1, 2), "Point{x: 1, y: 2}")

    Returns:
        A callable ``_assert(value, expected, declared=None, config=None) -> None``
        that raises ``AssertionError`` when the rendered text differs from
        ``expected``.
    """

    def _assert(
        value: Any,
        expected: str,
        declared: Any = None,
        config: EncoderConfig | None = None,
    ) -> None:
        """Assert that ``value`` renders to exactly ``expected``.

        Raises:
            AssertionError: With the value, the expected text and the actual
                text when they differ.
        """
        actual = to_string(value, declared=declared, config=config)
        if actual != expected:
            raise AssertionError(
                f"Rust literal mismatch:\n"
                f"  value:    {value!r}\n"
                f"  expected: {expected}\n"
                f"  actual:   {actual}"
            )

    return _assert
