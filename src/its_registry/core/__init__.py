"""
ITS Registry Core Module

Validation engine, data model, lookup ports and their adapters.
"""

__all__ = []
