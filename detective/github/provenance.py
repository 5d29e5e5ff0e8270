"""Detect repositories scaffolded by the Lovable AI app builder."""

import logging
import re

from detective.analysis.models import CommitRecord, Provenance, RemoteFile
from detective.github.contents import RemoteError

logger = logging.getLogger(__name__)

TOOL_NAME = "lovable"
BOT_LOGIN = "lovable-dev[bot]"
BOT_NAME = "lovable-dev"
BOT_EMAIL = "lovable.dev"

# Commit message markers left by the tool
_COMMIT_PATTERNS = [
    r"lovable",
    r"ai generated",
    r"auto-generated",
]
_COMMIT_RE = re.compile("|".join(f"(?:{p})" for p in _COMMIT_PATTERNS), re.I)

_TEMPLATE_MARKERS = (
    "components.json",
    "src/lib/utils.ts",
    "src/components/ui/",
    "tailwind.config.ts",
    "vite.config.ts",
)
_TEMPLATE_MIN_MARKERS = 3

UI_COMPONENTS_DIR = "src/components/ui"
_UI_COMPONENTS_MIN = 5

_KEYWORD_FILES = ("index.html", "package.json", "README.md")

_MIN_INDICATORS = 2


def _is_bot_commit(commit: CommitRecord) -> bool:
    return (
        commit.author_login == BOT_LOGIN
        or BOT_NAME in commit.author_name
        or BOT_EMAIL in commit.author_email
    )


def _find_file(files: list[RemoteFile], target: str) -> RemoteFile | None:
    for f in files:
        if f.name.lower() == target.lower() or f.path == target:
            return f
    return None


async def _ui_component_paths(source, files: list[RemoteFile]) -> list[str]:
    """
    Paths under the generated UI components directory. The walker prunes
    that directory, so list it directly when the gathered files lack it.
    """
    prefix = UI_COMPONENTS_DIR + "/"
    paths = [f.path for f in files if prefix in f.path]
    if paths or source is None:
        return paths
    try:
        entries = await source.list_directory(UI_COMPONENTS_DIR)
    except RemoteError as exc:
        logger.debug("No %s listing: %s", UI_COMPONENTS_DIR, exc)
        return []
    return [e.path for e in entries if e.kind == "file"]


async def _keyword_hits(source, files: list[RemoteFile]) -> list[str]:
    hits: list[str] = []
    if source is None:
        return hits
    for target in _KEYWORD_FILES:
        f = _find_file(files, target)
        if f is None or not f.download_url:
            continue
        try:
            content = await source.fetch_raw(f.download_url)
        except RemoteError as exc:
            logger.warning("Could not check %s for %s keywords: %s", target, TOOL_NAME, exc)
            continue
        if TOOL_NAME in content.lower():
            hits.append(target)
    return hits


async def detect_provenance(
    source,
    metadata: dict | None,
    commits: list[CommitRecord],
    files: list[RemoteFile],
) -> Provenance:
    """
    Collect independent scaffolding indicators. The repository counts as
    generated when at least two indicators fire or any commit was made
    by the tool's bot account. *source* may be None to skip the
    best-effort fetches.
    """
    indicators: list[str] = []

    description = (metadata or {}).get("description") or ""
    if TOOL_NAME in description.lower():
        indicators.append("Repository description mentions Lovable")

    bot_commits = [c for c in commits if _is_bot_commit(c)]
    if bot_commits:
        indicators.append(f"Found {len(bot_commits)} commits by {BOT_LOGIN}")

    marker_commits = [c for c in commits if c.message and _COMMIT_RE.search(c.message)]
    if marker_commits:
        indicators.append(f"Found {len(marker_commits)} commits with Lovable-related messages")

    for target in await _keyword_hits(source, files):
        indicators.append(f'Found "{TOOL_NAME}" keyword in {target}')

    ui_paths = await _ui_component_paths(source, files)
    found = sum(1 for marker in _TEMPLATE_MARKERS if any(marker in f.path for f in files))
    if ui_paths and not any("src/components/ui/" in f.path for f in files):
        found += 1
    if found >= _TEMPLATE_MIN_MARKERS:
        indicators.append("Project structure matches Lovable template")

    if len(ui_paths) > _UI_COMPONENTS_MIN:
        indicators.append(f"Found {len(ui_paths)} shadcn/ui components")

    return Provenance(
        is_generated=len(indicators) >= _MIN_INDICATORS or bool(bot_commits),
        indicators=indicators,
    )
