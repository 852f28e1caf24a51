"""
Per-turn latency tracker.

Usage:
    tracker = MetricsTracker()
    tracker.record(TurnMetrics(session_id="abc", classify_ms=0.2, ...))
    tracker.summary_stats()
"""
from __future__ import annotations
import time
import json
import os
from dataclasses import dataclass, asdict
from typing import List, Dict, Optional

from companion.utils.logging import logger


@dataclass
class TurnMetrics:
    session_id: Optional[str] = None
    category: str = ""
    emotion: str = ""
    classify_ms: float = 0.0
    generation_ms: float = 0.0
    total_ms: float = 0.0
    fallback: bool = False
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = time.strftime("%Y-%m-%dT%H:%M:%S")

    def summary(self) -> str:
        return (
            f"total={self.total_ms:.0f}ms "
            f"[classify={self.classify_ms:.1f} generation={self.generation_ms:.0f}] "
            f"category={self.category} fallback={self.fallback}"
        )


class MetricsTracker:
    def __init__(self, log_path: str = "logs/metrics.jsonl"):
        self.log_path = log_path
        directory = os.path.dirname(log_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def record(self, m: TurnMetrics) -> None:
        logger.info(f"Turn: {m.summary()}")
        self._persist(m)

    # ── Persistence ──────────────────────────────────────────────────────────

    def _persist(self, m: TurnMetrics) -> None:
        try:
            with open(self.log_path, "a") as f:
                f.write(json.dumps(asdict(m)) + "\n")
        except OSError as e:
            logger.warning(f"Metrics: could not write {self.log_path} — {e}")

    def load_history(self) -> List[Dict]:
        try:
            with open(self.log_path) as f:
                return [json.loads(line) for line in f if line.strip()]
        except FileNotFoundError:
            return []

    def summary_stats(self) -> Dict:
        history = self.load_history()
        if not history:
            return {}
        keys = ["classify_ms", "generation_ms", "total_ms"]
        stats: Dict = {}
        for k in keys:
            vals = [h[k] for h in history if k in h]
            if vals:
                stats[k] = {
                    "n": len(vals),
                    "mean": round(sum(vals) / len(vals), 1),
                    "min": round(min(vals), 1),
                    "max": round(max(vals), 1),
                }
        stats["fallback_rate"] = round(
            sum(1 for h in history if h.get("fallback")) / len(history), 3
        )
        return stats
