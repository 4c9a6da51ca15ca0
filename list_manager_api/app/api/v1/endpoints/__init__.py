"""
Endpoint subpackage for API v1.

Each module defines an ``APIRouter`` which is included by ``router.py``.
"""
