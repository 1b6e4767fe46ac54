"""
Natural language candidate search.
"""

from .semantic_filter import SemanticFilterAdapter, summarize, visible  # noqa: F401
