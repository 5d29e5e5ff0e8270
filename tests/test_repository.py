"""Tests for the end-to-end repository analysis pipeline with a fake GitHub source."""

import pytest

from detective.analysis.models import CommitRecord
from detective.analysis.repository import (
    InvalidSourceIdentifier,
    NoAnalyzableFiles,
    analyze_repository,
    parse_repository_url,
)
from detective.github.contents import RemoteListError
from fakes import FakeSource, remote_dir, remote_file

URL = "https://github.com/octo/widgets"

HELPERS_TS = """\
// Step 1: Validate the user input
export function parseAmount(userInput: string): number {
  if (userInput.length === 0) {
    throw new Error("Missing argument: amount");
  }
  const calculationResult = Number.parseFloat(userInput);
  return calculationResult;
}
"""

FORMAT_TS = """\
// quick hack, fix later
export const fmt = (n) => {
  console.log(n)
  return n.toFixed(2) // meh
}
"""


def _tree():
    return {
        "": [remote_dir("src"), remote_file("README.md"), remote_dir("node_modules")],
        "src": [remote_dir("src/utils"), remote_file("src/index.ts")],
        "src/utils": [
            remote_file("src/utils/helpers.ts"),
            remote_file("src/utils/format.ts"),
            remote_file("src/utils/empty.ts"),
        ],
    }


def _contents():
    return {
        "src/utils/helpers.ts": HELPERS_TS,
        "src/utils/format.ts": FORMAT_TS,
        "src/utils/empty.ts": "\n\n",
    }


class TestParseRepositoryUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/octo/widgets",
            "https://github.com/octo/widgets.git",
            "https://github.com/octo/widgets/tree/main/src",
            "github.com/octo/widgets?tab=readme",
        ],
    )
    def test_valid(self, url):
        assert parse_repository_url(url) == ("octo", "widgets")

    @pytest.mark.parametrize("url", ["", "not a url", "https://gitlab.com/octo/widgets", "https://github.com/octo"])
    def test_invalid(self, url):
        with pytest.raises(InvalidSourceIdentifier):
            parse_repository_url(url)


class TestAnalyzeRepository:
    @pytest.mark.asyncio
    async def test_happy_path(self):
        source = FakeSource(tree=_tree(), contents=_contents())
        calls = []
        result = await analyze_repository(URL, progress=lambda *a: calls.append(a), source=source)

        assert result.repository_url == URL
        assert result.total_files == 5
        assert result.analyzed_files == 2
        assert [f.path for f in result.files] == ["src/utils/helpers.ts", "src/utils/format.ts"]
        assert result.files[0].language == "typescript"
        assert calls == [
            (1, 3, "src/utils/helpers.ts"),
            (2, 3, "src/utils/format.ts"),
            (3, 3, "src/utils/empty.ts"),
        ]
        assert "node_modules" not in source.listed

    @pytest.mark.asyncio
    async def test_stats_are_line_weighted(self):
        source = FakeSource(tree=_tree(), contents=_contents())
        result = await analyze_repository(URL, source=source)
        stats = result.stats

        assert stats.total_lines == sum(f.verdict.total_lines for f in result.files)
        assert stats.ai_lines == sum(f.verdict.ai_lines for f in result.files)
        assert stats.ai_lines + stats.human_lines == stats.total_lines
        assert stats.ai_percentage + stats.human_percentage == pytest.approx(100)
        mean = sum(f.verdict.overall_confidence for f in result.files) / 2
        assert stats.overall_confidence == pytest.approx(mean)

    @pytest.mark.asyncio
    async def test_failed_file_is_dropped_but_counted(self):
        source = FakeSource(tree=_tree(), contents=_contents(), failing_files={"src/utils/format.ts"})
        calls = []
        result = await analyze_repository(URL, progress=lambda *a: calls.append(a), source=source)

        assert result.total_files == 5
        assert [f.path for f in result.files] == ["src/utils/helpers.ts"]
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_failed_subtree_degrades(self):
        source = FakeSource(
            tree={
                "": [remote_dir("lib"), remote_dir("src")],
                "src": [remote_file("src/a.ts")],
            },
            contents={"src/a.ts": HELPERS_TS},
            failing_dirs={"lib"},
        )
        result = await analyze_repository(URL, source=source)
        assert result.analyzed_files == 1

    @pytest.mark.asyncio
    async def test_no_analyzable_files(self):
        source = FakeSource(tree={"": [remote_file("README.md"), remote_file("src/index.ts")]})
        with pytest.raises(NoAnalyzableFiles):
            await analyze_repository(URL, source=source)

    @pytest.mark.asyncio
    async def test_invalid_url_fails_before_fetching(self):
        source = FakeSource(tree=_tree())
        with pytest.raises(InvalidSourceIdentifier):
            await analyze_repository("https://example.com/nope", source=source)
        assert source.listed == []

    @pytest.mark.asyncio
    async def test_root_listing_failure_is_fatal(self):
        source = FakeSource(failing_dirs={""})
        with pytest.raises(RemoteListError):
            await analyze_repository(URL, source=source)

    @pytest.mark.asyncio
    async def test_metadata_failure_is_not_fatal(self):
        class BrokenMetadata(FakeSource):
            async def fetch_metadata(self):
                raise RuntimeError("rate limited")

        source = BrokenMetadata(tree=_tree(), contents=_contents())
        result = await analyze_repository(URL, source=source)
        assert result.analyzed_files == 2
        assert result.provenance.is_generated is False

    @pytest.mark.asyncio
    async def test_provenance_from_commits(self):
        commits = [CommitRecord(author_login="lovable-dev[bot]", message="Initial commit")]
        source = FakeSource(tree=_tree(), contents=_contents(), commits=commits)
        result = await analyze_repository(URL, source=source)

        assert result.provenance.is_generated is True
        assert result.to_dict()["is_generated"] is True
