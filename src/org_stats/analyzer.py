"""Line statistics for a single repository."""

from __future__ import annotations

import base64
import logging
from typing import Any

from .classifier import LineCounts, classify_content, detect_language
from .github.client import GitHubClient
from .models import CodeStats, LanguageStats, Repository
from .progress import ProgressChannel
from .selector import select_source_files

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 100_000


def decode_blob(blob: dict[str, Any]) -> str | None:
    """Return the text of a blob payload, or None when it is not base64."""
    if blob.get("encoding") != "base64":
        return None
    raw = base64.b64decode((blob.get("content") or "").replace("\n", ""))
    return raw.decode("utf-8", errors="replace")


def compute_percentages(stats: CodeStats) -> None:
    if stats.total_lines == 0:
        return
    for entry in stats.language_breakdown.values():
        entry.percentage = entry.lines / stats.total_lines * 100


def add_file(stats: CodeStats, language: str, counts: LineCounts) -> None:
    # Only classified files are counted; skipped or failed ones leave no trace,
    # not even in file_count or the language's file tally.
    stats.total_lines += counts.total
    stats.code_lines += counts.code
    stats.comment_lines += counts.comment
    stats.blank_lines += counts.blank
    stats.file_count += 1

    entry = stats.language_breakdown.setdefault(language, LanguageStats())
    entry.lines += counts.total
    entry.files += 1


async def analyze_file(client: GitHubClient, entry: dict[str, Any]) -> LineCounts | None:
    """Classify one tree entry; None means the file contributes nothing."""
    if (entry.get("size") or 0) > MAX_FILE_SIZE:
        logger.debug("Skipping %s: %s bytes", entry["path"], entry.get("size"))
        return None
    blob = await client.get_blob(entry["url"])
    content = decode_blob(blob)
    if content is None:
        logger.debug("Skipping %s: %s encoding", entry["path"], blob.get("encoding"))
        return None
    return classify_content(content, entry["path"])


async def analyze_repository(
    client: GitHubClient,
    repo: Repository,
    progress: ProgressChannel | None = None,
) -> CodeStats:
    stats = CodeStats(repository=repo.name, branch=repo.default_branch)

    try:
        tree = await client.get_tree(repo.full_name, repo.default_branch)
    except Exception as e:
        logger.warning("Error fetching file tree for %s: %s", repo.name, e)
        return stats

    files = select_source_files(tree)
    for i, entry in enumerate(files):
        if progress:
            progress.emit(
                "analyzing", f"Analyzing file {entry['path']}...", i / len(files) * 100, repo.name
            )
        try:
            counts = await analyze_file(client, entry)
        except Exception as e:
            logger.warning("Could not analyze file %s in %s: %s", entry.get("path"), repo.name, e)
            continue
        if counts is not None:
            add_file(stats, detect_language(entry["path"]), counts)

    compute_percentages(stats)
    logger.debug(
        "%s: %d files, %d lines (%d code, %d comment, %d blank)",
        repo.name, stats.file_count, stats.total_lines,
        stats.code_lines, stats.comment_lines, stats.blank_lines,
    )
    return stats
