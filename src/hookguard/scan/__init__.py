"""Payload and file scanning.

Flattens hook payloads, runs rule registries against them, applies user
suppression lists and decides the hook exit status.
"""

from hookguard.scan.assess import assess
from hookguard.scan.detector import detect, detect_in_files
from hookguard.scan.flatten import flatten
from hookguard.scan.models import Assessment, Finding, PatternRule, Severity
from hookguard.scan.patterns import FILE_RULES, PAYLOAD_RULES, RISK_RULES
from hookguard.scan.policy import (
    EXIT_BLOCKED,
    EXIT_OK,
    EXIT_USAGE,
    Decision,
    Mode,
    decide_secrets,
    decide_security,
)
from hookguard.scan.suppression import SuppressionResult, compile_patterns, suppress

__all__ = [
    "Assessment",
    "Decision",
    "EXIT_BLOCKED",
    "EXIT_OK",
    "EXIT_USAGE",
    "FILE_RULES",
    "Finding",
    "Mode",
    "PAYLOAD_RULES",
    "PatternRule",
    "RISK_RULES",
    "Severity",
    "SuppressionResult",
    "assess",
    "compile_patterns",
    "decide_secrets",
    "decide_security",
    "detect",
    "detect_in_files",
    "flatten",
    "suppress",
]
