"""Repair pass for generated day markdown.

LLM output drifts: labels arrive without their `###` marker, sections are
repeated after a regeneration, required sections go missing, and the last
glyph of a label sometimes leaks onto its own line. `sanitize_day` turns any
of that into the canonical layout. It never raises and is idempotent.
"""

from backend.app.itinerary.document import SubsectionBlock, extract_subsections
from backend.app.itinerary.vocabulary import (
    DAY_HEADER_PREFIX,
    SUBSECTION_PREFIX,
    TEMPLATE_ORDER,
    is_section_label,
    label_line_title,
    label_tail_glyphs,
    placeholder_for,
)


def normalize_bare_labels(raw: str) -> str:
    """Turn bare label lines (`점심`) into subsection headers (`### 점심`)."""
    lines = []
    for line in raw.split("\n"):
        trimmed = line.strip()
        lines.append(f"{SUBSECTION_PREFIX}{trimmed}" if is_section_label(trimmed) else line)
    return "\n".join(lines)


def dedupe_sections(sections: list[SubsectionBlock]) -> list[SubsectionBlock]:
    """Keep only the last occurrence of each recognized label.

    Later duplicates come from regeneration and supersede earlier ones.
    Unrecognized sections are all kept.
    """
    last_index: dict[str, int] = {}
    for index, section in enumerate(sections):
        if section.is_recognized:
            last_index[section.label] = index

    return [
        section
        for index, section in enumerate(sections)
        if not section.is_recognized or last_index[section.label] == index
    ]


def strip_label_tail_artifacts(lines: list[str], label: str | None = None) -> list[str]:
    """Drop leaked label glyphs that precede the first content line.

    A leaked glyph is a line made of exactly one character that is the last
    character of a multi-character label (or of `label` itself).
    """
    tails = label_tail_glyphs(label)
    kept: list[str] = []
    seen_content = False

    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            kept.append(line)
            continue
        if not seen_content and len(trimmed) == 1 and trimmed in tails:
            continue
        if label_line_title(line) is None:
            seen_content = True
        kept.append(line)

    return kept


def clean_section_body(body: str, label: str | None = None) -> str:
    """Remove label residue from a section body."""
    lines = strip_label_tail_artifacts(body.split("\n"), label)
    cleaned: list[str] = []
    previous = ""

    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            cleaned.append(line)
            previous = ""
            continue
        if label_line_title(line) is not None:
            continue
        # single glyph repeating the end of the line above it
        if len(trimmed) == 1 and previous and previous.endswith(trimmed):
            continue
        cleaned.append(line)
        previous = trimmed

    return "\n".join(cleaned).strip()


def section_order(raw: str) -> list[str]:
    """Recognized labels in order of first appearance."""
    seen: list[str] = []
    for section in extract_subsections(raw):
        if section.is_recognized and section.label not in seen:
            seen.append(section.label)
    return seen


def sanitize_day(raw: str, day_number: int) -> str:
    """Rebuild one day into the canonical layout.

    Layout: header, preamble, recognized sections in first-appearance order
    (template order when there are none, placeholders for missing ones),
    then unrecognized sections. Blocks are separated by one blank line.
    """
    normalized = normalize_bare_labels(raw.replace("\r\n", "\n"))
    lines = normalized.split("\n")

    if lines and lines[0].startswith(DAY_HEADER_PREFIX):
        header = lines[0].rstrip()
        start = 1
    else:
        header = f"{DAY_HEADER_PREFIX}{day_number}"
        start = 0

    preamble: list[str] = []
    for line in lines[start:]:
        trimmed = line.strip()
        if trimmed.startswith(SUBSECTION_PREFIX):
            break
        if trimmed and not is_section_label(trimmed):
            preamble.append(line)

    sections = dedupe_sections(extract_subsections(normalized))
    bodies = {
        section.label: clean_section_body(section.body, section.label)
        for section in sections
        if section.is_recognized
    }

    order = section_order(normalized) or list(TEMPLATE_ORDER)
    chunks = [header]
    preamble_text = "\n".join(preamble).rstrip()
    if preamble_text:
        chunks.append(preamble_text)

    for label in order:
        body = bodies.get(label) or placeholder_for(label)
        chunks.append(f"{SUBSECTION_PREFIX}{label}\n{body}")

    for section in sections:
        if section.is_recognized:
            continue
        body = clean_section_body(section.body, section.label)
        chunks.append(
            f"{SUBSECTION_PREFIX}{section.label}\n{body}" if body else f"{SUBSECTION_PREFIX}{section.label}"
        )

    return "\n\n".join(chunks).rstrip()


def empty_day_block(day_number: int, title: str) -> str:
    """A day with the template sections and placeholder bodies."""
    return sanitize_day(f"{DAY_HEADER_PREFIX}{day_number} - {title}", day_number)
