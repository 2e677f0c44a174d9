"""
自动补全模块
"""

from .catalog import (
    Completion,
    LATEX_COMMANDS,
    TABLE_SNIPPETS,
    ENVIRONMENT_SNIPPETS,
    PACKAGE_COMPLETIONS,
    all_completions,
)
from .snippets import ExpandedSnippet, expand_snippet
from .resolver import (
    CompletionResult,
    resolve_completions,
    rank_completions,
    apply_completion,
)

__all__ = [
    "Completion",
    "LATEX_COMMANDS",
    "TABLE_SNIPPETS",
    "ENVIRONMENT_SNIPPETS",
    "PACKAGE_COMPLETIONS",
    "all_completions",
    "ExpandedSnippet",
    "expand_snippet",
    "CompletionResult",
    "resolve_completions",
    "rank_completions",
    "apply_completion",
]
