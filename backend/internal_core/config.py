from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_API_BASE_URL = "https://371kvaeiy5.execute-api.ap-south-1.amazonaws.com/prod"


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None else value


def _getenv_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _getenv_opt_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return int(value)


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _getenv_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


@dataclass(frozen=True)
class DemoConfig:
    REAGVIS_APP_NAME: str
    REAGVIS_API_BASE_URL: str
    REAGVIS_ANALYZE_BUCKET: str
    REAGVIS_MIN_DELAY_MS: int
    REAGVIS_SIMULATED_LATENCY_MS: int
    REAGVIS_HTTP_TIMEOUT_SECONDS: float
    REAGVIS_UPLOAD_RETRIES: int
    REAGVIS_DEMO_OVERRIDES: bool
    REAGVIS_RANDOM_SEED: Optional[int]
    REAGVIS_INITIAL_TOTAL: int
    REAGVIS_INITIAL_REJECTED: int
    REAGVIS_INITIAL_MANUAL: int
    REAGVIS_INITIAL_APPROVED: int
    REAGVIS_MAX_UPLOAD_BYTES: int
    REAGVIS_LOG_LEVEL: str

    def initial_stats(self) -> dict[str, int]:
        return {
            "total": self.REAGVIS_INITIAL_TOTAL,
            "rejected": self.REAGVIS_INITIAL_REJECTED,
            "manual": self.REAGVIS_INITIAL_MANUAL,
            "approved": self.REAGVIS_INITIAL_APPROVED,
        }


def load_config() -> DemoConfig:
    config = DemoConfig(
        REAGVIS_APP_NAME=_getenv_str("REAGVIS_APP_NAME", "Reagvis Labs Pvt. Ltd."),
        REAGVIS_API_BASE_URL=_getenv_str("REAGVIS_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
        REAGVIS_ANALYZE_BUCKET=_getenv_str("REAGVIS_ANALYZE_BUCKET", "doc-risk-demo-reagvis"),
        REAGVIS_MIN_DELAY_MS=_getenv_int("REAGVIS_MIN_DELAY_MS", 800),
        REAGVIS_SIMULATED_LATENCY_MS=_getenv_int("REAGVIS_SIMULATED_LATENCY_MS", 1500),
        REAGVIS_HTTP_TIMEOUT_SECONDS=_getenv_float("REAGVIS_HTTP_TIMEOUT_SECONDS", 30.0),
        REAGVIS_UPLOAD_RETRIES=_getenv_int("REAGVIS_UPLOAD_RETRIES", 1),
        REAGVIS_DEMO_OVERRIDES=_getenv_bool("REAGVIS_DEMO_OVERRIDES", True),
        REAGVIS_RANDOM_SEED=_getenv_opt_int("REAGVIS_RANDOM_SEED"),
        REAGVIS_INITIAL_TOTAL=_getenv_int("REAGVIS_INITIAL_TOTAL", 124),
        REAGVIS_INITIAL_REJECTED=_getenv_int("REAGVIS_INITIAL_REJECTED", 12),
        REAGVIS_INITIAL_MANUAL=_getenv_int("REAGVIS_INITIAL_MANUAL", 5),
        REAGVIS_INITIAL_APPROVED=_getenv_int("REAGVIS_INITIAL_APPROVED", 107),
        REAGVIS_MAX_UPLOAD_BYTES=_getenv_int("REAGVIS_MAX_UPLOAD_BYTES", 20 * 1024 * 1024),
        REAGVIS_LOG_LEVEL=_getenv_str("REAGVIS_LOG_LEVEL", "INFO"),
    )

    counted = (
        config.REAGVIS_INITIAL_APPROVED
        + config.REAGVIS_INITIAL_REJECTED
        + config.REAGVIS_INITIAL_MANUAL
    )
    if counted != config.REAGVIS_INITIAL_TOTAL:
        raise ValueError(
            "Initial KPI counters are inconsistent: "
            f"total={config.REAGVIS_INITIAL_TOTAL} but approved+rejected+manual={counted}."
        )
    if config.REAGVIS_UPLOAD_RETRIES < 0:
        raise ValueError("REAGVIS_UPLOAD_RETRIES must be >= 0.")
    return config
