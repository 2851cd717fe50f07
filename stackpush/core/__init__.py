"""
Core deployment pipeline for stackpush.
"""
