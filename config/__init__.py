"""
Configuration Package

All tunable values live in config/settings.py.
"""
