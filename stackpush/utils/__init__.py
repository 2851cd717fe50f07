"""
Utilities for stackpush CLI.
"""
