"""
Storage Interfaces Package

Abstract contract for session persistence.
"""
