"""
Activity Logger Utility

Provides activity logging for the empathy recommendation service.
Logs are written to JSONL files (one file per day) for easy parsing.
"""

import json
import os
import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional, Any
from pathlib import Path

logger = logging.getLogger(__name__)

# Base directory for activity logs
BASE_LOG_DIR = "data/activity_logs"

EMPATHY_LOG_DIR = os.path.join(BASE_LOG_DIR, "empathy")

# Lock for thread-safe file writing
_empathy_lock = threading.Lock()


def _ensure_log_dir(log_dir: str):
    """Ensure log directory exists."""
    os.makedirs(log_dir, exist_ok=True)


def _get_log_file(log_dir: str, prefix: str) -> str:
    """
    Get log file path for today's date.

    Args:
        log_dir: Log directory path
        prefix: File prefix (e.g., "empathy")

    Returns:
        Path to log file
    """
    _ensure_log_dir(log_dir)
    today = datetime.now().strftime("%Y%m%d")
    return os.path.join(log_dir, f"{prefix}_activity_{today}.jsonl")


def log_empathy_activity(
    status: str,  # "success", "degraded", "error"
    detected_mood: Optional[str] = None,
    confidence: Optional[int] = None,
    warnings: Optional[List[str]] = None,
    sources: Optional[List[Dict[str, Any]]] = None,
    has_location: bool = False,
    error: Optional[str] = None,
    duration_seconds: Optional[float] = None
):
    """
    Log empathy service activity.

    Args:
        status: Activity status ("success", "degraded", "error")
        detected_mood: Resolved mood category (if produced)
        confidence: Confidence score (if produced)
        warnings: Fallback warnings attached to the response
        sources: Analysis sources with their weights
        has_location: Whether coordinates were supplied
        error: Error message (if failed)
        duration_seconds: Processing duration in seconds
    """
    log_file = _get_log_file(EMPATHY_LOG_DIR, "empathy")

    log_entry = {
        "timestamp": datetime.now().isoformat(),
        "status": status,
        "detected_mood": detected_mood,
        "confidence": confidence,
        "warnings": warnings or [],
        "sources": sources or [],
        "has_location": has_location,
        "error": error,
        "duration_seconds": duration_seconds
    }

    try:
        with _empathy_lock:
            with open(log_file, 'a', encoding='utf-8') as f:
                f.write(json.dumps(log_entry, ensure_ascii=False) + '\n')
        logger.debug(f"Logged empathy activity to {log_file}")
    except Exception as e:
        logger.warning(f"Failed to log empathy activity: {e}", exc_info=True)


def read_activity_logs(
    log_dir: str,
    limit: int = 100,
    status: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    Read activity logs from directory.

    Args:
        log_dir: Log directory path
        limit: Maximum number of entries to return
        status: Optional filter by status

    Returns:
        List of log entries (newest first)
    """
    if not os.path.exists(log_dir):
        return []

    all_entries = []

    for log_file in Path(log_dir).glob("*.jsonl"):
        try:
            with open(log_file, 'r', encoding='utf-8') as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entry = json.loads(line)
                    except json.JSONDecodeError:
                        continue
                    if status and entry.get("status") != status:
                        continue
                    all_entries.append(entry)
        except OSError as e:
            logger.warning(f"Error reading log file {log_file}: {e}")
            continue

    all_entries.sort(key=lambda entry: entry.get("timestamp", ""), reverse=True)
    return all_entries[:limit]
