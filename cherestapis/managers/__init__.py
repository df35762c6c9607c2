"""Workspace assembly managers.

Each module encapsulates one stage of the assembly pipeline.  Managers raise
domain exceptions from ``cherestapis.errors`` (``LookupError``,
``ValueError``, ``RuntimeError`` subclasses), never HTTP exceptions -- that
translation is the router's responsibility.
"""
