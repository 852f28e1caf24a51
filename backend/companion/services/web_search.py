"""
Web context — no API key required.

General : DuckDuckGo Instant Answer API (free, no key)

Used only when a generation request sets allow_internet_context.
"""
from __future__ import annotations

import re
from typing import Optional

import httpx

from companion.config import settings
from companion.utils.logging import logger

# Prompts carry the user message as: User message: "..."
_MESSAGE_RE = re.compile(r'User message: "(.*)"\s*$', re.DOTALL)


def _query_from_prompt(prompt: str) -> str:
    match = _MESSAGE_RE.search(prompt)
    return (match.group(1) if match else prompt).strip()[:200]


async def fetch_ddg(query: str) -> Optional[str]:
    """Fetch a DuckDuckGo Instant Answer abstract for the query."""
    try:
        async with httpx.AsyncClient(timeout=settings.WEB_SEARCH_TIMEOUT_S) as client:
            resp = await client.get(
                "https://api.duckduckgo.com/",
                params={"q": query, "format": "json", "no_redirect": "1", "no_html": "1"},
            )
            if resp.status_code == 200:
                data = resp.json()
                abstract = data.get("AbstractText", "").strip()
                if abstract:
                    logger.info(f"Web: DDG answer fetched ({len(abstract)} chars)")
                    return abstract[:400]
    except (httpx.HTTPError, ValueError) as e:
        logger.debug(f"Web: DDG fetch failed — {e}")
    return None


async def search_context(prompt: str) -> Optional[str]:
    """
    Returns a short background string for the user message inside ``prompt``,
    or None when nothing useful was found. Never raises.
    """
    query = _query_from_prompt(prompt)
    if not query:
        return None
    return await fetch_ddg(query)
