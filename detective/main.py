import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, HTTPException, Request

from detective.analysis.detect import classify
from detective.analysis.models import RepositoryVerdict
from detective.analysis.repository import (
    InvalidSourceIdentifier,
    NoAnalyzableFiles,
    analyze_repository,
)
from detective.analysis.stats import usage_level
from detective.github.contents import RemoteError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "javascript"


def _validate_config() -> None:
    """Warn about config that limits repository analysis."""
    if not os.environ.get("GITHUB_TOKEN"):
        logger.warning(
            "GITHUB_TOKEN not set; repository analysis is limited to 60 unauthenticated requests/hour"
        )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    _validate_config()
    yield


app = FastAPI(title="Code Detective", lifespan=lifespan)


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be JSON")
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return body


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/analyze/code")
async def analyze_code(request: Request):
    body = await _json_body(request)
    code = body.get("code")
    language = body.get("language") or DEFAULT_LANGUAGE
    if not isinstance(code, str) or not code.strip():
        raise HTTPException(status_code=400, detail="No code provided")

    verdict = classify(code, language)
    logger.info(
        "Snippet (%s): %d lines, %.1f%% AI", language, verdict.total_lines, verdict.ai_percentage,
    )
    result = verdict.to_dict()
    result["usage_level"] = usage_level(verdict.ai_percentage).to_dict()
    return result


@app.post("/analyze/repository")
async def analyze_repo(request: Request, format: str = "json"):
    body = await _json_body(request)
    url = body.get("url")
    if not isinstance(url, str) or not url.strip():
        raise HTTPException(status_code=400, detail="No repository URL provided")

    def _progress(done: int, total: int, path: str) -> None:
        logger.info("[%d/%d] %s", done, total, path)

    try:
        verdict = await analyze_repository(url.strip(), progress=_progress)
    except InvalidSourceIdentifier as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except NoAnalyzableFiles as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except RemoteError as exc:
        logger.error("Repository fetch failed for %s: %s", url, exc)
        raise HTTPException(status_code=502, detail=str(exc))

    if format == "markdown":
        return {"report": _format_report(verdict)}

    result = verdict.to_dict()
    result["usage_level"] = usage_level(verdict.stats.ai_percentage).to_dict()
    return result


def _format_report(verdict: RepositoryVerdict, top: int = 10) -> str:
    """Build a Markdown summary of a repository analysis."""
    stats = verdict.stats
    level = usage_level(stats.ai_percentage)

    lines: list[str] = []
    lines.append("## Code Detective Analysis")
    lines.append("")
    lines.append(f"`{verdict.repository_url}`")
    lines.append("")
    lines.append(
        f"**Usage:** {level.label} | "
        f"**AI lines:** {stats.ai_percentage:.1f}% | "
        f"**Confidence:** {stats.overall_confidence * 100:.0f}%"
    )
    lines.append(
        f"**Files:** {verdict.analyzed_files} analyzed of {verdict.total_files} | "
        f"**Lines:** {stats.total_lines} ({stats.ai_lines} AI, {stats.human_lines} human)"
    )
    lines.append("")
    lines.append(f"_{level.description}_")

    if verdict.provenance.is_generated:
        lines.append("")
        lines.append("### Generated with Lovable")
        for indicator in verdict.provenance.indicators:
            lines.append(f"- {indicator}")
    elif verdict.provenance.indicators:
        lines.append("")
        lines.append("### Provenance hints")
        for indicator in verdict.provenance.indicators:
            lines.append(f"- {indicator}")

    if verdict.files:
        ranked = sorted(
            verdict.files,
            key=lambda f: (-f.verdict.ai_percentage, f.path),
        )[:top]
        lines.append("")
        lines.append(f"### Most AI-like files (top {len(ranked)})")
        lines.append("")
        lines.append("| File | Language | Lines | AI % |")
        lines.append("| --- | --- | ---: | ---: |")
        for f in ranked:
            lines.append(
                f"| `{f.path}` | {f.language} | {f.verdict.total_lines} | {f.verdict.ai_percentage:.1f}% |"
            )
    else:
        lines.append("")
        lines.append("No files could be fetched and classified.")

    lines.append("")
    lines.append("---")
    lines.append("_Heuristic estimate only; not proof of authorship._")
    return "\n".join(lines)
