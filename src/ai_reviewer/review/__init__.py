from ai_reviewer.review.diff import parse_diff
from ai_reviewer.review.filters import filter_files, is_included, split_patterns
from ai_reviewer.review.models import (
    AddedLine,
    Comment,
    ContextLine,
    DiffFile,
    Hunk,
    PRContext,
    RejectedSuggestion,
    RemovedLine,
    ReviewUnit,
)
from ai_reviewer.review.units import decompose, valid_target_lines

__all__ = [
    "parse_diff",
    "filter_files",
    "is_included",
    "split_patterns",
    "AddedLine",
    "Comment",
    "ContextLine",
    "DiffFile",
    "Hunk",
    "PRContext",
    "RejectedSuggestion",
    "RemovedLine",
    "ReviewUnit",
    "decompose",
    "valid_target_lines",
]
