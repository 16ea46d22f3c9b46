"""
Arango_Ops - Document and Index Operations for ArangoDB

A toolkit for document-level CRUD against ArangoDB over HTTP: single and
batch create, read, update, replace and remove on document, vertex and edge
collections, with per-item result correlation for batches, plus read-only
index descriptors.
"""

__version__ = "0.1.0"
__author__ = "RhythmX"
