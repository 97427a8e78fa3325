"""Rewrites applied to annotation text before it is classified.

The rules run in list order and each one assumes the output of the ones before it,
e.g. the date shorthand expansions only see three-letter months and ", " separators.
"""
import re
from collections.abc import Callable

_MONTH_NAMES = r"January|February|March|April|June|July|August|September|Sept|October|November|December"

NORMALIZATION_RULES: list[tuple[re.Pattern[str], str | Callable[[re.Match[str]], str]]] = [
    # trailing periods
    (re.compile(r"\.+$"), ""),
    # full month names -> "Apr", "Jul", ...
    (re.compile(rf"\b({_MONTH_NAMES})\b", re.IGNORECASE), lambda m: m.group(1)[:3]),
    # the year is implied by the schedule's date range
    (re.compile(r", \d{4}\b"), ""),
    (re.compile(r"( & |, and | and )", re.IGNORECASE), ", "),
    # "Jul4" -> "Jul 4"
    (re.compile(r"\b([a-z]{3})(\d{1,2})\b", re.IGNORECASE), r"\1 \2"),
    # "Jul 4 Jul 5" -> "Jul 4, Jul 5"
    (re.compile(r"\b([a-z]{3} \d{1,2}) (?=[a-z]{3} \d{1,2}\b)", re.IGNORECASE), r"\1, "),
    # "Jul 1, 2, 3" -> "Jul 1, Jul 2, Jul 3"
    (re.compile(r"\b([a-z]{3}) (\d{1,2}),? (\d{1,2}),? (\d{1,2})\b", re.IGNORECASE), r"\1 \2, \1 \3, \1 \4"),
    # "Jul 1, 2" -> "Jul 1, Jul 2"
    (re.compile(r"\b([a-z]{3}) (\d{1,2}),? (\d{1,2})\b", re.IGNORECASE), r"\1 \2, \1 \3"),
    # "Jul 1, Jul 2 only" -> "Only Jul 1, Jul 2"
    (re.compile(r"^([a-z]{3} \d{1,2}(?:, [a-z]{3} \d{1,2})*) only$", re.IGNORECASE), r"Only \1"),
    (re.compile(r"^(DG Sailing only\b.*), no other passengers permitted$", re.IGNORECASE), r"\1"),
]


def normalize_annotation(text: str) -> str:
    out = text.strip()
    for pattern, replacement in NORMALIZATION_RULES:
        out = pattern.sub(replacement, out)
    return out
