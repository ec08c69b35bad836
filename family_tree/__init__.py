"""
Family Tree - Genealogical graph of people linked by parent/child edges.

This package builds ancestry trees for a person and guards new parent/child
links against relationships between people who already share close lineage.
"""

__version__ = "0.1.0"
__author__ = "Family Tree Contributors"
