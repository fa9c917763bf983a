# infra/config_loader.py
"""
Central configuration loader for the app.

Responsibilities (SRP):
- Provide a single place to define default configuration values.
- Allow simple environment variable overrides for quick tweaks (no code changes).

Audit thresholds are NOT configurable here; they live in checks.policies so
the score stays a pure function of the bundle.

Environment variables:
- GA4AUDIT_LOG_LEVEL          (DEBUG/INFO/WARNING/ERROR)
- GA4AUDIT_LOG_DIR            (directory for ga4audit.log)
- GA4AUDIT_HISTORY_PATH       (JSON file backing the score history)
- GA4AUDIT_HISTORY_KEY        (storage key, default "ga4-score-history")
- GA4AUDIT_SCAN_TIMEOUT_MS    (int; page-load ceiling for website scans)
- GA4AUDIT_SCAN_HEADLESS      ("1"/"true"/"yes" -> True)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict


_DEFAULT: Dict[str, Any] = {
    "log_level": "INFO",
    "log_dir": str(Path.cwd() / "logs"),
    "history_path": str(Path.home() / ".ga4audit" / "score_history.json"),
    "history_key": "ga4-score-history",

    # Website scan
    "scan_timeout_ms": 30_000,            # hard ceiling; exceeding it fails the scan
    "scan_headless": True,
    "scan_wait_until": "networkidle",
}


def load_config() -> Dict[str, Any]:
    """
    Return a config dict. Environment variables can override some keys.

    Integers:
      - GA4AUDIT_SCAN_TIMEOUT_MS

    Booleans:
      - GA4AUDIT_SCAN_HEADLESS

    Strings:
      - GA4AUDIT_LOG_LEVEL
      - GA4AUDIT_LOG_DIR
      - GA4AUDIT_HISTORY_PATH
      - GA4AUDIT_HISTORY_KEY
    """
    cfg = dict(_DEFAULT)

    _int_env(cfg, "scan_timeout_ms", "GA4AUDIT_SCAN_TIMEOUT_MS")
    _bool_env(cfg, "scan_headless", "GA4AUDIT_SCAN_HEADLESS")
    _str_upper_env(cfg, "log_level", "GA4AUDIT_LOG_LEVEL")
    _str_env(cfg, "log_dir", "GA4AUDIT_LOG_DIR")
    _str_env(cfg, "history_path", "GA4AUDIT_HISTORY_PATH")
    _str_env(cfg, "history_key", "GA4AUDIT_HISTORY_KEY")

    return cfg


# ----------------- helpers -----------------

def _bool_env(cfg: Dict[str, Any], key: str, env_key: str) -> None:
    val = os.getenv(env_key)
    if val is None:
        return
    s = val.strip().lower()
    cfg[key] = s in {"1", "true", "yes", "on"}


def _int_env(cfg: Dict[str, Any], key: str, env_key: str) -> None:
    val = os.getenv(env_key)
    if val and val.strip().isdigit():
        cfg[key] = int(val)


def _str_env(cfg: Dict[str, Any], key: str, env_key: str) -> None:
    val = os.getenv(env_key)
    if val is not None and val.strip():
        cfg[key] = val.strip()


def _str_upper_env(cfg: Dict[str, Any], key: str, env_key: str) -> None:
    val = os.getenv(env_key)
    if val is not None:
        cfg[key] = val.strip().upper()
