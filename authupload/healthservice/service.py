from __future__ import annotations

import logging
import shutil
from typing import Callable, Dict, Optional

import psutil

from .config import HealthSettings
from .contracts import HealthReport, IndicatorResult

log = logging.getLogger("authupload.health")

Indicator = Callable[[], IndicatorResult]


def _rss_bytes() -> int:
    return psutil.Process().memory_info().rss


class HealthService:
    """Runs named indicators and folds them into a single up/down report."""

    def __init__(self, db_ping: Callable[[], None], settings: Optional[HealthSettings] = None):
        self.db_ping = db_ping
        self.settings = settings or HealthSettings()

    # ---- Indicators ----
    def database(self) -> IndicatorResult:
        try:
            self.db_ping()
        except Exception as e:
            log.warning("health.database down error=%s", e)
            return IndicatorResult(status="down", details={"message": str(e)})
        return IndicatorResult(status="up")

    def memory(self) -> IndicatorResult:
        rss = _rss_bytes()
        limit = self.settings.HEALTH_MEMORY_RSS_MAX_BYTES
        status = "up" if rss < limit else "down"
        return IndicatorResult(status=status, details={"rss_bytes": rss, "max_bytes": limit})

    def storage(self) -> IndicatorResult:
        try:
            usage = shutil.disk_usage(self.settings.HEALTH_DISK_PATH)
        except OSError as e:
            return IndicatorResult(status="down", details={"message": str(e)})
        used = usage.used / usage.total if usage.total else 1.0
        threshold = self.settings.HEALTH_DISK_THRESHOLD
        status = "up" if used < threshold else "down"
        return IndicatorResult(status=status, details={"used_ratio": round(used, 4), "threshold": threshold})

    # ---- Probes ----
    def run(self, indicators: Dict[str, Indicator]) -> HealthReport:
        report = HealthReport(status="ok")
        for name, fn in indicators.items():
            res = fn().as_dict()
            report.details[name] = res
            if res["status"] == "up":
                report.info[name] = res
            else:
                report.error[name] = res
        if report.error:
            report.status = "error"
        return report

    def check(self) -> HealthReport:
        return self.run({"database": self.database, "memory_rss": self.memory, "storage": self.storage})

    def readiness(self) -> HealthReport:
        return self.run({"database": self.database})

    def liveness(self) -> Dict[str, str]:
        return {"status": "ok"}
