"""
Service layer.

``list_service`` holds the business logic for lists; ``list_store``
defines the persistence interface it depends on and a SQLite
implementation of it.
"""
