"""
Top-level package for the List Manager API.

The HTTP application lives in ``list_manager_api.app`` and a small
``requests``-based client for it in ``list_manager_api.client``.
"""

__all__ = []
