"""
Matching Engine Package

Confidence-scored reconciliation of ledger transactions against retailer
orders.

Key Components:
- retailers: Per-retailer payee aliases, subscription conventions, memo style
- scorer: Amount-gated confidence scoring for single and group matches
- memo: Memo synthesis and sanitization
- single_matcher: Best single order per transaction
- group_matcher: Transaction groups that settle split-charge orders
- processed: Processed-id ledger and memo-content idempotence checks
- orchestrator: Batch pipeline, confidence gating and update application
"""

from .group_matcher import GroupMatcher
from .memo import MemoSynthesizer, sanitize
from .models import ConfidenceClass, ConfidenceThresholds, Match, ReconciliationResult
from .orchestrator import ReconciliationOrchestrator
from .processed import MemoContentCheck, ProcessedCheck, ProcessedIdCheck, ProcessedLedger
from .retailers import AMAZON, BUILTIN_PROFILES, WALMART, RetailerProfile, load_profiles, resolve_profiles
from .scorer import MatchScore, MatchScorer
from .single_matcher import SingleMatcher

__all__ = [
    "AMAZON",
    "BUILTIN_PROFILES",
    "WALMART",
    "ConfidenceClass",
    "ConfidenceThresholds",
    "GroupMatcher",
    "Match",
    "MatchScore",
    "MatchScorer",
    "MemoContentCheck",
    "MemoSynthesizer",
    "ProcessedCheck",
    "ProcessedIdCheck",
    "ProcessedLedger",
    "ReconciliationOrchestrator",
    "ReconciliationResult",
    "RetailerProfile",
    "SingleMatcher",
    "load_profiles",
    "resolve_profiles",
    "sanitize",
]
