"""Test utilities for mockingbird servers::

    from mockingbird.testing import TestClient
"""

from mockingbird.testing.client import TestClient

__all__ = ["TestClient"]
