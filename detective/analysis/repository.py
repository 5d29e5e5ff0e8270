"""Analyze every eligible file of a GitHub repository."""

import asyncio
import logging
import os
import re
from typing import Callable

from detective.analysis.detect import classify
from detective.analysis.models import FileAnalysis, Provenance, RepositoryVerdict
from detective.analysis.stats import RepositoryTotals
from detective.github.contents import GitHubContents
from detective.github.provenance import detect_provenance
from detective.github.walker import MAX_DEPTH, is_analyzable, language_for_path, walk

logger = logging.getLogger(__name__)

COMMIT_LIMIT = int(os.environ.get("DETECTIVE_COMMIT_LIMIT", "30"))

_REPO_URL_RE = re.compile(r"github\.com/([^/\s]+)/([^/\s#?]+)")

ProgressCallback = Callable[[int, int, str], None]


class InvalidSourceIdentifier(ValueError):
    """The repository URL could not be parsed."""


class NoAnalyzableFiles(Exception):
    """No file in the repository passed the analyzability filter."""


def parse_repository_url(url: str) -> tuple[str, str]:
    """Return (owner, repo) from a github.com URL."""
    m = _REPO_URL_RE.search(url or "")
    if not m:
        raise InvalidSourceIdentifier(
            "Invalid GitHub repository URL. Please use format: https://github.com/owner/repo"
        )
    owner, repo = m.group(1), m.group(2)
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    return owner, repo


async def _best_effort(coro, default):
    try:
        return await coro
    except Exception as exc:
        logger.warning("Provenance fetch failed: %s", exc)
        return default


async def analyze_repository(
    url: str,
    progress: ProgressCallback | None = None,
    source=None,
    max_depth: int = MAX_DEPTH,
) -> RepositoryVerdict:
    """
    Walk the repository, classify each analyzable file in traversal order
    and fold the results into a RepositoryVerdict.

    Raises InvalidSourceIdentifier for an unparseable URL, RemoteListError
    when the root listing fails and NoAnalyzableFiles when nothing passes
    the filter. Any other failure only drops the affected file, subtree or
    provenance indicator.
    """
    owner, repo = parse_repository_url(url)
    if source is None:
        source = GitHubContents(owner, repo)

    all_files = await walk(source, "", max_depth)
    metadata, commits = await asyncio.gather(
        _best_effort(source.fetch_metadata(), None),
        _best_effort(source.fetch_commits(COMMIT_LIMIT), []),
    )

    candidates = [f for f in all_files if is_analyzable(f)]
    logger.info(
        "%s/%s: %d files found, %d analyzable", owner, repo, len(all_files), len(candidates),
    )
    if not candidates:
        raise NoAnalyzableFiles("No analyzable code files found in this repository")

    totals = RepositoryTotals()
    for done, f in enumerate(candidates, start=1):
        try:
            content = await source.fetch_raw(f.download_url)
            if content.strip():
                language = language_for_path(f.path)
                totals.add(FileAnalysis(
                    path=f.path,
                    language=language,
                    size=f.size,
                    verdict=classify(content, language),
                ))
        except Exception as exc:
            logger.warning("Failed to analyze %s: %s", f.path, exc)
        if progress is not None:
            progress(done, len(candidates), f.path)

    provenance = await _best_effort(
        detect_provenance(source, metadata, commits, all_files), Provenance(),
    )
    verdict = totals.build(url, len(all_files), provenance)
    logger.info(
        "%s/%s: analyzed %d/%d files, %.1f%% AI lines",
        owner, repo, verdict.analyzed_files, len(candidates), verdict.stats.ai_percentage,
    )
    return verdict
