"""Enumerate repository files and decide which of them are worth classifying."""

import asyncio
import logging
import os
import re

from detective.analysis.models import RemoteFile

logger = logging.getLogger(__name__)

MAX_DEPTH = int(os.environ.get("DETECTIVE_MAX_DEPTH", "4"))
MAX_FILE_SIZE = 1024 * 1024

_LANGUAGE_BY_EXTENSION = {
    ".js": "javascript",
    ".jsx": "jsx",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".py": "python",
    ".java": "java",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".cxx": "cpp",
    ".c++": "cpp",
    ".cs": "csharp",
    ".go": "go",
    ".rs": "rust",
    ".php": "php",
    ".rb": "ruby",
    ".swift": "swift",
    ".kt": "kotlin",
    ".scala": "scala",
    ".sh": "bash",
    ".sql": "sql",
    ".html": "html",
    ".css": "css",
    ".scss": "scss",
    ".sass": "sass",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".xml": "xml",
    ".md": "markdown",
}

_CODE_EXTENSIONS = frozenset({
    ".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".cpp", ".cc", ".cxx", ".c++",
    ".cs", ".go", ".rs", ".php", ".rb", ".swift", ".kt", ".scala", ".vue", ".svelte",
})

_SKIP_DIR_NAMES = frozenset({
    # dependencies and build output
    "node_modules", "dist", "build", ".next", ".nuxt", "coverage", ".nyc_output",
    "public", "static", "assets",
    # generated
    ".generated", ".gen",
    # vcs and ide
    ".git", ".svn", ".hg", ".vscode", ".idea", ".vs",
    # tooling config
    ".husky", ".github", ".gitlab",
    # temp
    "tmp", "temp", ".cache", ".temp",
})

_SKIP_DIR_PATH = re.compile(
    r"(^|/)(node_modules|dist|build)(/|$)"
    r"|(^|/)components/ui(/|$)"
    r"|(^|/)\."
)

_FILE_EXCLUDE_PATTERNS = tuple(re.compile(p) for p in (
    # framework UI components
    r"/components/ui/",
    r"(^|/)ui/",
    r"\.shadcn/",
    # build and dependency folders
    r"node_modules/",
    r"dist/",
    r"build/",
    r"\.next/",
    r"\.nuxt/",
    r"coverage/",
    # generated files and type declarations
    r"\.generated\.",
    r"\.gen\.",
    r"\.min\.(js|css)$",
    r"\.d\.ts$",
    r"types\.ts$",
    # tool configuration
    r"(tailwind|vite|webpack|next|nuxt|rollup|babel|jest|vitest|postcss|eslint|prettier)\.config\.",
    # manifests and lockfiles
    r"package\.json$",
    r"package-lock\.json$",
    r"yarn\.lock$",
    r"pnpm-lock\.yaml$",
    r"bun\.lockb$",
    # conventional entry points
    r"(^|/)(main|index)\.(js|ts|jsx|tsx)$",
    r"(^|/)App\.(js|ts|jsx|tsx)$",
    # tests
    r"\.(test|spec)\.(js|ts|jsx|tsx)$",
    r"__tests__/",
    r"\.test/",
    r"(^|/)test_[^/]*\.py$",
    r"_test\.(py|go)$",
    # documentation
    r"\.mdx?$",
    # hidden and config folders
    r"(^|/)\.",
))


def _extension(path: str) -> str:
    _, ext = os.path.splitext(path.lower())
    return ext


def language_for_path(path: str) -> str:
    """Map a file path to the language tag used by the line classifier."""
    return _LANGUAGE_BY_EXTENSION.get(_extension(path), "text")


def should_skip_directory(path: str, name: str) -> bool:
    """True for dependency, build, generated, VCS/IDE, hidden and temp directories."""
    if name in _SKIP_DIR_NAMES or name.startswith("."):
        return True
    return _SKIP_DIR_PATH.search(path) is not None


def should_analyze_file(path: str) -> bool:
    """True if *path* is a recognized code file not matching any exclusion pattern."""
    if _extension(path) not in _CODE_EXTENSIONS:
        return False
    return not any(p.search(path) for p in _FILE_EXCLUDE_PATTERNS)


def is_analyzable(file: RemoteFile) -> bool:
    return (
        file.kind == "file"
        and should_analyze_file(file.path)
        and 0 < file.size < MAX_FILE_SIZE
        and bool(file.download_url)
    )


async def _walk_subtree(source, entry: RemoteFile, max_depth: int) -> list[RemoteFile]:
    try:
        return await walk(source, entry.path, max_depth)
    except Exception as exc:
        logger.warning("Skipping directory %s: %s", entry.path, exc)
        return []


async def walk(source, path: str = "", max_depth: int = MAX_DEPTH) -> list[RemoteFile]:
    """
    Recursively collect every file entry under *path*, pruning excluded
    directories. Stops silently once *max_depth* is exhausted. A failed
    subtree listing contributes no files; a failed listing of *path*
    itself raises ``RemoteListError``.
    """
    if max_depth <= 0:
        return []

    entries = await source.list_directory(path)
    subdirs = [
        e for e in entries
        if e.kind == "dir" and not should_skip_directory(e.path, e.name)
    ]
    subtrees = await asyncio.gather(
        *(_walk_subtree(source, d, max_depth - 1) for d in subdirs)
    )
    by_path = {d.path: files for d, files in zip(subdirs, subtrees)}

    files: list[RemoteFile] = []
    for entry in entries:
        if entry.kind == "file":
            files.append(entry)
        elif entry.path in by_path:
            files.extend(by_path[entry.path])
    return files
