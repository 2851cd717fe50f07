"""
Command implementations for stackpush.
"""
