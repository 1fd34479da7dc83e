"""Best-effort Jira enrichment of Tempo worklogs."""

import asyncio
import logging
from dataclasses import replace
from typing import Callable

from models import IssueDetails, TempoWorklog

logger = logging.getLogger(__name__)

IssueLookup = Callable[[str], IssueDetails | None]

UNRESOLVED = IssueDetails()
DEFAULT_MAX_CONCURRENCY = 8


def collect_issue_urls(worklogs: list[TempoWorklog]) -> list[str]:
    """Distinct issue URLs in order of first appearance."""
    urls: dict[str, None] = {}
    for wl in worklogs:
        if wl.issue and wl.issue.self_url:
            urls.setdefault(wl.issue.self_url)
    return list(urls)


async def _resolve(url: str, lookup: IssueLookup, semaphore: asyncio.Semaphore) -> IssueDetails:
    async with semaphore:
        try:
            details = await asyncio.to_thread(lookup, url)
        except Exception as e:
            logger.warning("Issue lookup failed for %s: %s", url, e)
            return UNRESOLVED

    if details is None:
        logger.warning("Issue lookup returned nothing for %s", url)
        return UNRESOLVED
    return details


async def resolve_issues(
    urls: list[str], lookup: IssueLookup, max_concurrency: int = DEFAULT_MAX_CONCURRENCY
) -> dict[str, IssueDetails]:
    """Look up every URL once, at most ``max_concurrency`` at a time.

    Failed lookups map to ``UNRESOLVED`` instead of raising.
    """
    semaphore = asyncio.Semaphore(max(1, max_concurrency))
    results = await asyncio.gather(*(_resolve(url, lookup, semaphore) for url in urls))
    return dict(zip(urls, results))


def apply_issue_details(
    worklogs: list[TempoWorklog], resolved: dict[str, IssueDetails]
) -> list[TempoWorklog]:
    """Attach resolved key/summary to each worklog referencing a resolved issue."""
    enriched = []
    for wl in worklogs:
        details = resolved.get(wl.issue.self_url) if wl.issue else None
        if details and details.key:
            wl = replace(wl, issue=replace(wl.issue, key=details.key, summary=details.summary))
        enriched.append(wl)
    return enriched


async def enrich_worklogs(
    worklogs: list[TempoWorklog],
    lookup: IssueLookup,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> list[TempoWorklog]:
    """Return the worklogs with Jira issue key and summary filled in where possible."""
    urls = collect_issue_urls(worklogs)
    if not urls:
        return list(worklogs)

    resolved = await resolve_issues(urls, lookup, max_concurrency)
    unresolved = sum(1 for details in resolved.values() if not details.key)
    logger.info("Resolved %d of %d issues", len(urls) - unresolved, len(urls))
    return apply_issue_details(worklogs, resolved)
