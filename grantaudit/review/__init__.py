"""Review list management module for Grant Audit."""

from .manager import ReviewTracker, review_item_for_program, program_review_items

__all__ = ["ReviewTracker", "review_item_for_program", "program_review_items"]
