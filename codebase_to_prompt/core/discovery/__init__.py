# codebase_to_prompt/core/discovery/__init__.py
"""
Path discovery and filtering for codebase_to_prompt.

This package walks the directory tree, applying .gitignore rules, hidden-file
suppression and extension filters, and yields the eligible files in a stable
order.
"""
from .pattern_matching import IgnoreRule, PatternMatcher, load_gitignore_rules, parse_ignore_lines
from .walker import FileEntry, walk

__all__ = [
    "FileEntry",
    "IgnoreRule",
    "PatternMatcher",
    "load_gitignore_rules",
    "parse_ignore_lines",
    "walk",
]
