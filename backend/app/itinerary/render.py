"""HTML rendering of itinerary markdown for share pages and previews.

Markdown is rendered with Python-Markdown. Raw HTML in the source is not
passed through; it is escaped like any other text. A link stays an anchor
only when its target passes `sanitize_url`, otherwise its label is kept in a
`<span>`.
"""

import re
import xml.etree.ElementTree as etree

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from backend.app.itinerary.document import extract_days
from backend.app.itinerary.sanitize import sanitize_day
from backend.app.models.itinerary import RenderedDay, RenderResponse

_GOOGLE_MAPS_RE = re.compile(r"^(maps\.google\.com|google\.com/maps)", re.IGNORECASE)
_TRAVEL_SITE_RE = re.compile(r"^(tripadvisor\.com|wikivoyage\.org|timeout\.com)", re.IGNORECASE)
_HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)

# raw HTML and images are never rendered from generated text
_DISABLED_PREPROCESSORS = ("html_block",)
_DISABLED_INLINE_PATTERNS = ("html", "image_link", "image_reference", "short_image_ref")


def sanitize_url(url: str) -> str | None:
    """Return a safe absolute http(s) URL for a link target, or None.

    Fragment and site-relative targets are refused. Bare `www.`, Google Maps
    and a few well-known travel domains get an `https://` prefix.
    """
    trimmed = url.strip()
    if not trimmed or trimmed.startswith(("#", "/")):
        return None
    if trimmed.startswith("www."):
        trimmed = f"https://{trimmed}"
    if _GOOGLE_MAPS_RE.match(trimmed) or _TRAVEL_SITE_RE.match(trimmed):
        trimmed = f"https://{trimmed}"
    if not _HTTP_RE.match(trimmed):
        return None
    return trimmed


class SafeLinkTreeprocessor(Treeprocessor):
    """Open safe links in a new tab and turn the rest into spans."""

    def run(self, root: etree.Element) -> None:
        for element in list(root.iter("a")):
            safe = sanitize_url(element.get("href", ""))
            element.attrib.clear()
            if safe is None:
                element.tag = "span"
                continue
            element.set("href", safe)
            element.set("target", "_blank")
            element.set("rel", "noopener noreferrer")


class SafeItineraryExtension(Extension):
    """Escape raw HTML, drop images and apply the link policy."""

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        for name in _DISABLED_PREPROCESSORS:
            md.preprocessors.deregister(name, strict=False)
        for name in _DISABLED_INLINE_PATTERNS:
            md.inlinePatterns.deregister(name, strict=False)
        # after inline processing (20) so every link element exists
        md.treeprocessors.register(SafeLinkTreeprocessor(md), "safe_links", 5)


def render_markdown_html(text: str) -> str:
    """Render itinerary markdown to an HTML fragment."""
    md = markdown.Markdown(extensions=[SafeItineraryExtension(), "sane_lists", "nl2br"])
    return md.convert(text)


def render_itinerary(text: str) -> RenderResponse:
    """Sanitize and render every day; a document without days renders as prose."""
    days: list[RenderedDay] = []
    for day in extract_days(text):
        clean = sanitize_day(day.raw, day.number)
        days.append(
            RenderedDay(
                day_num=day.number,
                title=day.title,
                raw=clean,
                html=render_markdown_html(clean),
            )
        )
    if not days:
        return RenderResponse(days=[], html=render_markdown_html(text))
    return RenderResponse(days=days, html="\n".join(day.html for day in days))
