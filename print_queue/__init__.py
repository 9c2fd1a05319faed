"""
Print Queue Service

A persistent multi-tenant print job queue with exclusive claims,
durable history and non-destructive reprints.
"""

__version__ = "1.0.0"
