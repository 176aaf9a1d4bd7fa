"""Field value codecs.

This module converts live field values to and from their portable
representation, one strategy per field type.
"""
