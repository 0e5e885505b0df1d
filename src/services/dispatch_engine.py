"""
Ticket extraction and dispatch engine.

Decides from a raw speech transcript whether a maintenance ticket should be
opened, for which building, and at which priority. The engine is pure: no
network, no store, no clock unless ``today`` is omitted. Keyword lists and
regex patterns are the whole model, so every decision can be reproduced
from a literal string.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Pattern, Sequence, Tuple

from models.dispatch import (
    ClassificationOutcome,
    CreateTicket,
    DispatchDecision,
    Incomplete,
    Suppressed,
)
from models.ticket import Priority

CHILD_INPUT_REASON = "child_input"
CHILD_INPUT_MARKER = "child's input"

CHILD_KEYWORDS: Tuple[str, ...] = (
    "monster",
    "toy",
    "mommy",
    "daddy",
    "play",
    "game",
    "batman",
    "spiderman",
)

PROBLEM_KEYWORDS: Tuple[str, ...] = (
    "broken",
    "not working",
    "leaking",
    "leak",
    "fix",
    "repair",
    "ac",
    "air conditioner",
    "heater",
    "light",
    "lights",
    "electrical",
    "plumbing",
    "elevator",
    "fan",
    "toilet",
    "door",
    "window",
    "heating",
    "cooling",
    "internet",
    "wifi",
    "computer",
    "printer",
    "projector",
    "issue",
    "problem",
)

# Most urgent first; the first tier that matches wins.
PRIORITY_RULES: Tuple[Tuple[Priority, Tuple[str, ...]], ...] = (
    (Priority.P1, ("leak", "fire", "gas", "emergency", "flood", "electrical shock")),
    (
        Priority.P2,
        (
            "ac",
            "air conditioner",
            "air conditioning",
            "heating",
            "heater",
            "electrical",
            "power",
            "elevator",
        ),
    ),
    (Priority.P3, ("light", "internet", "wifi", "computer", "network")),
)

# Tried in order, first match wins. The bare form comes first, so an early
# "building is ..." captures "IS" even if "in building C" follows.
LOCATION_PATTERNS: Tuple[str, ...] = (
    r"building\s+([a-z0-9]+)",
    r"in\s+building\s+([a-z0-9]+)",
    r"at\s+building\s+([a-z0-9]+)",
    r"from\s+building\s+([a-z0-9]+)",
)


def keyword_pattern(keywords: Iterable[str]) -> Pattern[str]:
    """
    Compile keywords into one case-insensitive alternation.

    Keywords match at the start of a word so inflections still count
    ("leaking", "lights"); two-letter tokens such as "ac" must be whole words
    so "place" or "back" never do.
    """
    parts = []
    for keyword in keywords:
        body = r"\s+".join(re.escape(word) for word in keyword.split())
        suffix = r"\b" if len(keyword) <= 2 else ""
        parts.append(rf"\b{body}{suffix}")
    return re.compile("|".join(parts), re.IGNORECASE)


def substring_pattern(keywords: Iterable[str]) -> Pattern[str]:
    """Case-insensitive plain containment: "display" contains "play"."""
    return re.compile("|".join(re.escape(k) for k in keywords), re.IGNORECASE)


@dataclass
class DispatchEngine:
    """Stateless classifier; instances only hold compiled patterns."""

    child_keywords: Sequence[str] = CHILD_KEYWORDS
    problem_keywords: Sequence[str] = PROBLEM_KEYWORDS
    priority_rules: Sequence[Tuple[Priority, Sequence[str]]] = PRIORITY_RULES
    location_patterns: Sequence[str] = LOCATION_PATTERNS
    child_marker: str = CHILD_INPUT_MARKER
    _child_re: Pattern[str] = field(init=False, repr=False)
    _problem_re: Pattern[str] = field(init=False, repr=False)
    _priority_res: Tuple[Tuple[Priority, Pattern[str]], ...] = field(init=False, repr=False)
    _location_res: Tuple[Pattern[str], ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._child_re = substring_pattern(self.child_keywords)
        self._problem_re = keyword_pattern(self.problem_keywords)
        self._priority_res = tuple(
            (priority, keyword_pattern(words)) for priority, words in self.priority_rules
        )
        self._location_res = tuple(
            re.compile(pattern, re.IGNORECASE) for pattern in self.location_patterns
        )

    def is_child_input(self, transcript: str, assistant_reply: Optional[str] = None) -> bool:
        if self._child_re.search(transcript):
            return True
        return isinstance(assistant_reply, str) and self.child_marker in assistant_reply.lower()

    def extract_building(self, transcript: str) -> Optional[str]:
        """Return the upper-cased building token of the first matching pattern."""
        for pattern in self._location_res:
            match = pattern.search(transcript)
            if match:
                return match.group(1).upper()
        return None

    def has_problem(self, transcript: str) -> bool:
        return bool(self._problem_re.search(transcript))

    def score_priority(self, transcript: str) -> Priority:
        for priority, pattern in self._priority_res:
            if pattern.search(transcript):
                return priority
        return Priority.P4

    def classify(
        self, transcript: str, assistant_reply: Optional[str] = None
    ) -> ClassificationOutcome:
        """Compute every match result for one transcript."""
        building = self.extract_building(transcript)
        return ClassificationOutcome(
            is_child_input=self.is_child_input(transcript, assistant_reply),
            has_location=building is not None,
            has_problem=self.has_problem(transcript),
            building=building,
            priority=self.score_priority(transcript),
        )

    def evaluate(
        self,
        transcript: str,
        assistant_reply: Optional[str] = None,
        today: Optional[date] = None,
    ) -> DispatchDecision:
        """
        Decide what one utterance should do.

        The child-input gate wins over everything; otherwise a ticket needs
        both a building and a maintenance problem.
        """
        outcome = self.classify(transcript, assistant_reply)
        if outcome.is_child_input:
            return Suppressed(reason=CHILD_INPUT_REASON)
        if not (outcome.has_location and outcome.has_problem):
            return Incomplete(
                has_location=outcome.has_location, has_problem=outcome.has_problem
            )
        return CreateTicket(
            building=f"Building {outcome.building}",
            priority=outcome.priority,
            complaint=transcript.strip(),
            date=(today or date.today()).strftime("%m/%d/%Y"),
        )


_default_engine = DispatchEngine()


def evaluate(
    transcript: str, assistant_reply: Optional[str] = None, today: Optional[date] = None
) -> DispatchDecision:
    """Evaluate with the default keyword set."""
    return _default_engine.evaluate(transcript, assistant_reply, today)
