"""Line completion driven by the history of the surrounding git repository."""

from .buffer import TextBuffer
from .config import CompletionConfig, load_config
from .engine import CompletionEngine, CompletionOutcome, CompletionResult, Session
from .parens import ParenDiffResult, ParenState, ParenToken, SyntaxTable, diff, scan
from .query import Query, QueryExtractor, QueryMode, trim
from .ranking import CandidateRanker, CandidateSet
from .replace import BalancedReplacer

__all__ = [
    "BalancedReplacer",
    "CandidateRanker",
    "CandidateSet",
    "CompletionConfig",
    "CompletionEngine",
    "CompletionOutcome",
    "CompletionResult",
    "ParenDiffResult",
    "ParenState",
    "ParenToken",
    "Query",
    "QueryExtractor",
    "QueryMode",
    "Session",
    "SyntaxTable",
    "TextBuffer",
    "diff",
    "load_config",
    "scan",
    "trim",
]
