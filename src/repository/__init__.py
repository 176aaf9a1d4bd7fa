"""Live document storage layer.

This module models live documents and assets and the repository
contract the copier reads from and writes to.
"""
