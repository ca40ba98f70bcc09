"""Test utilities for getmail applications.

::

    from getmail.testing import TestClient
"""

from getmail.testing.client import TestClient

__all__ = ["TestClient"]
