"""
Storage Models Package

Data structures for session metadata.
"""
