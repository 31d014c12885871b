"""Structural edits over itinerary markdown.

Every operation takes the full document and returns a new full document.
Targeted operations return their input unchanged when the day number is not
present, so callers can compare input and output to detect a no-op.
"""

import re

from backend.app.itinerary.document import extract_subsections, parse_document, preamble_lines
from backend.app.itinerary.sanitize import (
    dedupe_sections,
    empty_day_block,
    normalize_bare_labels,
    sanitize_day,
)
from backend.app.itinerary.vocabulary import (
    DAY_HEADER_LINE_RE,
    DAY_HEADER_RE,
    NEW_DAY_TITLE,
    NOTES_LABEL,
    SUBSECTION_PREFIX,
    SectionLabel,
    format_day_header,
    is_section_label,
    subsection_title,
)

_LEADING_DAY_HEADER_RE = re.compile(r"^##\s*Day\s*\d+[^\n]*\n")
_NEWLINES_RE = re.compile(r"[\r\n]+")


def _label_text(label: SectionLabel | str) -> str:
    return label.value if isinstance(label, SectionLabel) else label


def strip_day_header(block: str) -> str:
    """Remove a leading day header line from a block."""
    return DAY_HEADER_LINE_RE.sub("", block.strip(), count=1).strip()


def replace_day(markdown: str, day_number: int, new_block: str) -> str:
    """Replace one day with regenerated text.

    The title comes from the header inside `new_block` when it has one,
    otherwise the existing header is kept. Any day header lines inside the
    block are dropped and the result is sanitized before splicing.
    """
    document = parse_document(markdown)
    index = document.index_of(day_number)
    if index is None:
        return markdown

    text = new_block.replace("\r\n", "\n").strip()
    header_match = DAY_HEADER_RE.search(text)
    if header_match:
        header = format_day_header(day_number, header_match.group(2).strip())
    else:
        header = document.days[index].header_line

    body = DAY_HEADER_RE.sub("", text).strip()
    block = sanitize_day(f"{header}\n{body}", day_number)
    return document.with_day_replaced(index, block).serialize().rstrip()


def replace_day_raw(markdown: str, day_number: int, new_block: str) -> str:
    """Splice an already well-formed day block in place of a day."""
    document = parse_document(markdown)
    index = document.index_of(day_number)
    if index is None:
        return markdown
    return document.with_day_replaced(index, new_block.rstrip()).serialize().rstrip()


def normalize_section_block(block: str, label: SectionLabel | str) -> str:
    """Reduce generated text to a single `### label` block.

    Drops a leading day header and anything outside the requested section.
    """
    label = _label_text(label)
    normalized = block.replace("\r\n", "\n").strip()
    if not normalized:
        return f"{SUBSECTION_PREFIX}{label}"

    without_header = _LEADING_DAY_HEADER_RE.sub("", normalized, count=1).strip()
    lines = without_header.split("\n")

    def section_title(line: str) -> str | None:
        title = subsection_title(line)
        if title is not None:
            return title
        trimmed = line.strip()
        return trimmed if is_section_label(trimmed) else None

    start = 0
    for i, line in enumerate(lines):
        if section_title(line) == label:
            start = i
            break

    body_lines: list[str] = []
    for i in range(start, len(lines)):
        title = section_title(lines[i])
        if i == start and title == label:
            continue
        if i != start and title is not None and title != label:
            break
        body_lines.append(lines[i])

    body = "\n".join(body_lines).strip()
    return f"{SUBSECTION_PREFIX}{label}\n{body}" if body else f"{SUBSECTION_PREFIX}{label}"


def replace_section(
    markdown: str, day_number: int, label: SectionLabel | str, new_section: str
) -> str:
    """Replace (or add) one section of a day, keeping the others in place."""
    label = _label_text(label)
    document = parse_document(markdown)
    day = document.day(day_number)
    if day is None:
        return markdown

    normalized = normalize_bare_labels(day.raw)
    header = normalized.split("\n", 1)[0]
    preamble = "\n".join(preamble_lines(normalized)).strip()
    sections = dedupe_sections(extract_subsections(normalized))
    replacement = normalize_section_block(new_section, label)

    blocks: list[str] = []
    replaced = False
    for section in sections:
        if section.label == label:
            blocks.append(replacement)
            replaced = True
        else:
            blocks.append(section.raw)
    if not replaced:
        blocks.append(replacement)

    chunks = [header]
    if preamble:
        chunks.append(preamble)
    chunks.extend(blocks)
    rebuilt = "\n\n".join(chunks).rstrip()

    return replace_day_raw(markdown, day_number, sanitize_day(rebuilt, day_number))


def append_day(markdown: str) -> str:
    """Append an empty template day numbered after the highest existing day."""
    document = parse_document(markdown)
    next_number = max(document.day_numbers, default=0) + 1
    block = empty_day_block(next_number, NEW_DAY_TITLE)
    return document.with_day_appended(block, next_number, NEW_DAY_TITLE).serialize()


def remove_day(markdown: str, day_number: int) -> str:
    """Clear a day back to the empty template, keeping its title and position."""
    day = parse_document(markdown).day(day_number)
    if day is None:
        return markdown
    return replace_day_raw(markdown, day_number, empty_day_block(day_number, day.title))


def rebuild_sequential(markdown: str, remove_day_num: int | None = None) -> str:
    """Renumber days 1..N, optionally dropping one day first.

    Text before the first day header is kept as a prefix.
    """
    document = parse_document(markdown)
    days = [day for day in document.days if remove_day_num is None or day.number != remove_day_num]
    days.sort(key=lambda day: day.number)

    rebuilt = [
        f"{format_day_header(index, day.title)}\n{day.body}".rstrip()
        for index, day in enumerate(days, start=1)
    ]
    prefix = document.prefix.rstrip()

    if not rebuilt:
        return prefix
    joined = "\n\n".join(rebuilt)
    return f"{prefix}\n\n{joined}\n" if prefix else f"{joined}\n"


def append_note(markdown: str, day_number: int, note: str) -> str:
    """Add a one-line note section to the end of a day."""
    clean = note.strip()
    if not clean:
        return markdown

    document = parse_document(markdown)
    index = document.index_of(day_number)
    if index is None:
        return markdown

    day = document.days[index]
    note_line = _NEWLINES_RE.sub(" / ", clean)
    block = f"{day.header_line}\n{day.body}\n\n{SUBSECTION_PREFIX}{NOTES_LABEL}\n- {note_line}"
    return document.with_day_replaced(index, block).serialize().rstrip()


def edit_day(markdown: str, day_number: int, text: str) -> str:
    """Replace a day's body with user-edited text under its existing title."""
    body = strip_day_header(text)
    if not body:
        return markdown

    day = parse_document(markdown).day(day_number)
    if day is None:
        return markdown
    return replace_day_raw(markdown, day_number, f"{format_day_header(day_number, day.title)}\n{body}\n")


def nights_from_markdown(markdown: str) -> int:
    """Nights implied by the number of days in the document."""
    return max(0, len(parse_document(markdown).days) - 1)
