"""Dependency discovery.

This module finds the documents and assets a document references,
directly and transitively up to a depth bound.
"""
