from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any


@dataclass
class MetricsCollector:
    counters: Counter[str] = field(default_factory=Counter)

    def increment(self, name: str, value: int = 1) -> None:
        self.counters[name] += value

    def record_outcome(self, operation: str, accepted: bool) -> None:
        self.increment(f"{operation}_total")
        self.increment(f"{operation}_{'accepted' if accepted else 'rejected'}_total")

    def snapshot(self) -> dict[str, Any]:
        accepted = sum(v for k, v in self.counters.items() if k.endswith("_accepted_total"))
        rejected = sum(v for k, v in self.counters.items() if k.endswith("_rejected_total"))
        return {
            "operations_total": accepted + rejected,
            "accepted_total": accepted,
            "rejected_total": rejected,
            "counters": dict(self.counters),
        }
