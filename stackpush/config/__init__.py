"""
Configuration for stackpush.
"""
