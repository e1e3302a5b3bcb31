"""Test utilities for funcframe apps.

    from funcframe.testing import TestClient
"""

from funcframe.testing.client import TestClient

__all__ = ["TestClient"]
