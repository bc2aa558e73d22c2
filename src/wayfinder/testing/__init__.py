"""Test utilities for wayfinder route configurations::

    from wayfinder.testing import assert_matched, assert_not_found
"""

from wayfinder.testing.assertions import assert_matched, assert_not_found, assert_redirected

__all__ = [
    "assert_matched",
    "assert_not_found",
    "assert_redirected",
]
