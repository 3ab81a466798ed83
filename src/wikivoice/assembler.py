"""Merge candidates and their summaries into result records."""

import re
from urllib.parse import quote

from wikivoice.data import Candidate, ResultRecord, SummaryFragment
from wikivoice.errors import AssemblyViolation

WIKI_PAGE_BASE_URL = "https://en.wikipedia.org/wiki/"
SUMMARY_MAX_CHARS = 200
SNIPPET_MAX_CHARS = 150
ELLIPSIS = "..."

_TAG_RE = re.compile(r"<[^>]*>")


def truncate(text: str, limit: int) -> str:
    """Keep the first ``limit`` characters, appending ``...`` if anything was cut."""
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def strip_tags(text: str) -> str:
    """Remove every angle-bracket-delimited span from ``text``.

    Stripping repeats until stable so nested fragments such as ``<<b>b>``
    cannot leave a tag behind.
    """
    previous = None
    while previous != text:
        previous = text
        text = _TAG_RE.sub("", text)
    return text


def build_link(title: str, base_url: str = WIKI_PAGE_BASE_URL) -> str:
    """Build the canonical page URL for a title.

    Every reserved character (including ``/``, ``&``, ``?``, ``#`` and
    quotes) is percent-encoded, non-ASCII as UTF-8, so unquoting the last
    path segment gives back the exact title.
    """
    return base_url + quote(title, safe="")


def assemble(
    candidate: Candidate,
    fragment: SummaryFragment,
    *,
    base_url: str = WIKI_PAGE_BASE_URL,
) -> ResultRecord:
    """Merge one candidate and its summary into a ``ResultRecord``.

    Raises:
        AssemblyViolation: If the candidate has no title or the fragment
            belongs to a different page.
    """
    if not candidate.title or not candidate.title.strip():
        raise AssemblyViolation(f"Candidate {candidate.page_id} has no title")
    if fragment.page_id != candidate.page_id:
        raise AssemblyViolation(
            f"Summary for page {fragment.page_id} paired with candidate {candidate.page_id}"
        )

    snippet: str | None = None
    if candidate.snippet:
        stripped = strip_tags(candidate.snippet).strip()
        snippet = truncate(stripped, SNIPPET_MAX_CHARS) if stripped else None

    return ResultRecord(
        title=candidate.title,
        summary=truncate(fragment.extract, SUMMARY_MAX_CHARS),
        link=build_link(candidate.title, base_url),
        snippet=snippet,
    )
