"""
Storage Implementations Package

SQLite and in-memory session stores.
"""
