"""Parser for weekly pick-sheet documents."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from pickem.schemas import Contest, ParseResult, Unresolved

logger = logging.getLogger(__name__)

NOISE_MARKERS: tuple[str, ...] = (
    "PICK SHEET",
    "TIME(ET)",
    "Byes:",
    "Tiebreaker:",
    "Name",
    "Total Correct",
    "PrintYour",
)
YEAR_RE = re.compile(r"^\d{4}$")
WEEK_RE = re.compile(r"WEEK\s+(\d+)", re.IGNORECASE)

DAY_KEYWORDS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (day, re.compile(day, re.IGNORECASE))
    for day in ("Thursday", "Friday", "Saturday", "Sunday", "Monday")
)

CLOCK_PATTERN = r"\d+:\d+\s*[ap]m"


@dataclass(frozen=True)
class ContestLinePattern:
    name: str
    regex: re.Pattern[str]

    def match(self, line: str) -> tuple[str, str, str] | None:
        m = self.regex.match(line)
        if m is None:
            return None
        away, home, kickoff = m.groups()
        return away.strip(), home.strip(), kickoff.strip()


def separator_pattern(name: str, separator: str) -> ContestLinePattern:
    """Build an ``<away> SEP <home> <clock>`` pattern for a literal separator."""
    regex = re.compile(
        rf"^(.+?)\s+{re.escape(separator)}\s+(.+?)\s+({CLOCK_PATTERN})$",
        re.IGNORECASE,
    )
    return ContestLinePattern(name=name, regex=regex)


# Tried in order; the first structural match wins.
CONTEST_LINE_PATTERNS: tuple[ContestLinePattern, ...] = (
    separator_pattern("at", "at"),
    separator_pattern("vs", "vs"),
    separator_pattern("at_sign", "@"),
)


def extract_week_number(text: str) -> int | None:
    m = WEEK_RE.search(text)
    if m is None:
        return None
    return int(m.group(1))


class ScheduleParser:
    """Single-pass line scanner carrying the current day as its only state."""

    def __init__(
        self,
        patterns: Sequence[ContestLinePattern] = CONTEST_LINE_PATTERNS,
        noise_markers: Iterable[str] = NOISE_MARKERS,
        initial_day: str = "Sunday",
    ) -> None:
        self.patterns = tuple(patterns)
        self.noise_markers = tuple(noise_markers)
        self.initial_day = initial_day

    def is_noise(self, line: str) -> bool:
        if not line:
            return True
        if YEAR_RE.match(line):
            return True
        return any(marker in line for marker in self.noise_markers)

    def match_day(self, line: str) -> str | None:
        for day, pattern in DAY_KEYWORDS:
            if pattern.search(line):
                return day
        return None

    def match_contest(self, line: str) -> tuple[str, str, str] | None:
        for pattern in self.patterns:
            fields = pattern.match(line)
            if fields is not None:
                return fields
        return None

    def parse(self, text: str) -> ParseResult:
        contests: list[Contest] = []
        current_day = self.initial_day
        skipped = 0

        for raw_line in text.splitlines():
            line = raw_line.strip()
            if self.is_noise(line):
                continue

            day = self.match_day(line)
            if day is not None:
                current_day = day
                continue

            fields = self.match_contest(line)
            if fields is None:
                skipped += 1
                logger.debug("Skipping unrecognized line %r", line)
                continue

            away, home, kickoff = fields
            contests.append(
                Contest(
                    id=len(contests) + 1,
                    away_name=away,
                    home_name=home,
                    day=current_day,
                    kickoff=kickoff,
                    result=Unresolved(),
                )
            )

        week_number = extract_week_number(text)
        logger.info(
            "Parsed schedule: contests=%s week=%s skipped_lines=%s",
            len(contests),
            week_number,
            skipped,
        )
        return ParseResult(week_number=week_number, contests=contests)


_DEFAULT_PARSER = ScheduleParser()


def parse_schedule(text: str) -> ParseResult:
    """Parse a pick-sheet document with the default contest-line patterns."""
    return _DEFAULT_PARSER.parse(text)
