"""
Shared utilities for veilleur components.
"""
