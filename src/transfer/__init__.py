"""Snapshot export, import, and transfer-root batch operations.

This module turns live documents into portable snapshots and back, and
moves whole dependency trees through an on-disk transfer root.
"""
