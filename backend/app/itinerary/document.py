"""Itinerary markdown as an immutable document tree.

A document is parsed once into a prefix plus an ordered tuple of day blocks.
Each day block keeps its exact source text, so serializing an unmodified tree
reproduces the input byte for byte. Mutations build a new tree and
serialize it; string layout rules live in this module only.
"""

import re
from dataclasses import dataclass, replace

from backend.app.itinerary.vocabulary import (
    DAY_HEADER_RE,
    SUBSECTION_PREFIX,
    is_section_label,
    subsection_title,
)

_EXCESS_BLANK_LINES_RE = re.compile(r"\n{3,}")


@dataclass(frozen=True)
class SubsectionBlock:
    """One `### label` section inside a day."""

    label: str
    body: str
    raw: str

    @property
    def is_recognized(self) -> bool:
        return is_section_label(self.label)


@dataclass(frozen=True)
class DayBlock:
    """One day: header line through the end of its content.

    `raw` excludes trailing whitespace; `trailing` holds the whitespace that
    separated it from the next day in the source.
    """

    number: int
    title: str
    raw: str
    trailing: str = ""

    @property
    def header_line(self) -> str:
        return self.raw.split("\n", 1)[0]

    @property
    def body(self) -> str:
        parts = self.raw.split("\n", 1)
        return parts[1].strip() if len(parts) > 1 else ""

    @property
    def sections(self) -> tuple[SubsectionBlock, ...]:
        return tuple(extract_subsections(self.raw))

    @classmethod
    def from_text(cls, text: str, number: int, title: str, trailing: str = "") -> "DayBlock":
        """Build a block from day text, reading number/title from its header when present."""
        match = DAY_HEADER_RE.match(text)
        if match:
            number, title = int(match.group(1)), match.group(2)
        return cls(number=number, title=title, raw=text, trailing=trailing)


@dataclass(frozen=True)
class DayRange:
    """Character span of one day inside a markdown string."""

    start: int
    end: int
    raw: str


@dataclass(frozen=True)
class ItineraryDocument:
    """Prefix text followed by day blocks in document order."""

    prefix: str
    days: tuple[DayBlock, ...]

    def serialize(self) -> str:
        return self.prefix + "".join(day.raw + day.trailing for day in self.days)

    def index_of(self, day_number: int) -> int | None:
        """Index of the first day with this number, or None."""
        for index, day in enumerate(self.days):
            if day.number == day_number:
                return index
        return None

    def day(self, day_number: int) -> DayBlock | None:
        index = self.index_of(day_number)
        return None if index is None else self.days[index]

    @property
    def day_numbers(self) -> list[int]:
        return [day.number for day in self.days]

    def with_day_replaced(self, index: int, text: str) -> "ItineraryDocument":
        """Return a new document with the day at index replaced by text.

        Runs of three or more newlines inside the new text collapse to one
        blank line. Neighbouring days are left untouched.
        """
        current = self.days[index]
        normalized = _EXCESS_BLANK_LINES_RE.sub("\n\n", text).rstrip()
        is_last = index == len(self.days) - 1
        new_day = DayBlock.from_text(
            normalized,
            number=current.number,
            title=current.title,
            trailing="" if is_last else "\n\n",
        )
        days = self.days[:index] + (new_day,) + self.days[index + 1 :]
        return replace(self, days=days)

    def with_day_appended(self, text: str, number: int, title: str) -> "ItineraryDocument":
        """Return a new document with a day added after the last one."""
        prefix = self.prefix
        days = list(self.days)
        if days:
            last = days[-1]
            days[-1] = replace(last, trailing="\n\n")
        elif prefix.strip():
            prefix = prefix.rstrip() + "\n\n"
        else:
            prefix = ""
        days.append(DayBlock.from_text(text.rstrip(), number=number, title=title, trailing="\n"))
        return ItineraryDocument(prefix=prefix, days=tuple(days))


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing untrusted markdown.

    `ok` is False when no day header was found; callers then render the
    whole text as unstructured prose.
    """

    ok: bool
    document: ItineraryDocument


def parse_document(markdown: str) -> ItineraryDocument:
    """Split markdown into a prefix and day blocks."""
    matches = list(DAY_HEADER_RE.finditer(markdown))
    if not matches:
        return ItineraryDocument(prefix=markdown, days=())

    days: list[DayBlock] = []
    for i, match in enumerate(matches):
        start = match.start()
        end = matches[i + 1].start() if i + 1 < len(matches) else len(markdown)
        span = markdown[start:end]
        raw = span.rstrip()
        days.append(
            DayBlock(
                number=int(match.group(1)),
                title=match.group(2),
                raw=raw,
                trailing=span[len(raw) :],
            )
        )
    return ItineraryDocument(prefix=markdown[: matches[0].start()], days=tuple(days))


def try_parse(markdown: str) -> ParseResult:
    document = parse_document(markdown)
    return ParseResult(ok=bool(document.days), document=document)


def extract_days(markdown: str) -> list[DayBlock]:
    """Day blocks in document order; empty when there is no day header."""
    return list(parse_document(markdown).days)


def find_day_range(markdown: str, day_number: int) -> DayRange | None:
    """Locate a day's span by number. None means the day is absent."""
    matches = list(DAY_HEADER_RE.finditer(markdown))
    for i, match in enumerate(matches):
        if int(match.group(1)) != day_number:
            continue
        start = match.start()
        end = matches[i + 1].start() if i + 1 < len(matches) else len(markdown)
        return DayRange(start=start, end=end, raw=markdown[start:end].rstrip())
    return None


def extract_subsections(day_raw: str) -> list[SubsectionBlock]:
    """Split a day's text at `### ` headers.

    Text before the first header is not part of any subsection.
    """
    lines = day_raw.split("\n")
    sections: list[SubsectionBlock] = []
    current_title: str | None = None
    current_start = -1

    def flush(end: int) -> None:
        if current_title is None:
            return
        section_lines = lines[current_start:end]
        sections.append(
            SubsectionBlock(
                label=current_title,
                body="\n".join(section_lines[1:]).strip(),
                raw="\n".join(section_lines).rstrip(),
            )
        )

    for i, line in enumerate(lines):
        title = subsection_title(line)
        if title is None:
            continue
        flush(i)
        current_title = title
        current_start = i

    flush(len(lines))
    return sections


def preamble_lines(day_raw: str) -> list[str]:
    """Lines between the day header and the first subsection header."""
    lines = day_raw.split("\n")[1:]
    result: list[str] = []
    for line in lines:
        if line.strip().startswith(SUBSECTION_PREFIX):
            break
        result.append(line)
    return result
