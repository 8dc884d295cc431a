"""
Snapshot Export Module.

Serializes analytics snapshots to JSON (the full snapshot, camelCase keys)
or to CSV (one row per file) and writes them to the report directory.
"""

import os
from typing import List

import pandas as pd

from config import logger
from analyzers.models import AnalyticsSnapshot

CSV_COLUMNS = ["File", "Commits", "Additions", "Deletions", "Contributors", "LastModified"]
SUPPORTED_FORMATS = ("json", "csv")


def snapshot_to_json(snapshot: AnalyticsSnapshot) -> str:
    return snapshot.model_dump_json(by_alias=True, indent=2)


def files_to_csv(snapshot: AnalyticsSnapshot) -> str:
    """
    Render the file statistics of a snapshot as CSV.

    Contributors of a file are joined with ``;``.

    Args:
        snapshot (AnalyticsSnapshot): Snapshot to export

    Returns:
        str: CSV document with a header row
    """
    df = pd.DataFrame(
        [
            {
                "File": f.path,
                "Commits": f.commit_count,
                "Additions": f.total_additions,
                "Deletions": f.total_deletions,
                "Contributors": ";".join(f.contributors),
                "LastModified": f.last_modified,
            }
            for f in snapshot.files
        ],
        columns=CSV_COLUMNS,
    )
    return df.to_csv(index=False, lineterminator="\n")


def write_exports(
    snapshot: AnalyticsSnapshot, output_dir: str, formats: List[str]
) -> List[str]:
    """
    Write a snapshot to ``<owner>_<repo>_analytics.<format>`` files.

    Args:
        snapshot (AnalyticsSnapshot): Snapshot to export
        output_dir (str): Target directory, created if missing
        formats (List[str]): Any of ``json`` and ``csv``

    Returns:
        List[str]: Paths of the written files

    Raises:
        ValueError: If a format is not supported
        OSError: If a file cannot be written
    """
    unsupported = [fmt for fmt in formats if fmt not in SUPPORTED_FORMATS]
    if unsupported:
        raise ValueError(f"Unsupported export formats: {', '.join(unsupported)}")

    os.makedirs(output_dir, exist_ok=True)
    safe_name = snapshot.repo_name.replace("/", "_").replace("\\", "_")
    written = []

    for fmt in formats:
        content = snapshot_to_json(snapshot) if fmt == "json" else files_to_csv(snapshot)
        file_path = os.path.join(output_dir, f"{safe_name}_analytics.{fmt}")
        try:
            with open(file_path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            logger.error(
                {
                    "message": "Failed to write export",
                    "repository": snapshot.repo_name,
                    "file_path": file_path,
                    "error": str(e),
                }
            )
            raise
        written.append(file_path)

    logger.info(
        {
            "message": "Exported repository analytics",
            "repository": snapshot.repo_name,
            "files": written,
        }
    )
    return written
