"""Portable snapshot model.

This module defines the filtered transfer representation of a
document and its JSON encoding.
"""
