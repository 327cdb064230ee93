"""Counters, gauges and timings for the chat service."""
from collections import defaultdict
from typing import Any, Dict, List, Optional
import time


class MetricsCollector:
    """Collects time-series metrics about turns, intents and complaints."""

    def __init__(self, service_name: str, max_datapoints: int = 1000):
        self.service_name = service_name
        self.series: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.counters: Dict[str, int] = defaultdict(int)
        self.gauges: Dict[str, float] = {}
        self.max_datapoints = max_datapoints

    def increment(self, name: str, value: int = 1, tags: Optional[Dict[str, str]] = None):
        self.counters[name] += value
        self._record(name, value, "counter", tags)

    def gauge(self, name: str, value: float, tags: Optional[Dict[str, str]] = None):
        self.gauges[name] = value
        self._record(name, value, "gauge", tags)

    def timing(self, name: str, duration_ms: float, tags: Optional[Dict[str, str]] = None):
        self._record(name, duration_ms, "timing", tags)

    def _record(self, name: str, value: float, kind: str, tags: Optional[Dict[str, str]]):
        points = self.series[name]
        points.append({
            "timestamp": time.time(),
            "value": value,
            "type": kind,
            "tags": tags or {}
        })
        if len(points) > self.max_datapoints:
            del points[:-self.max_datapoints]

    def get_metric_data(self, name: str, time_period_minutes: Optional[int] = 60) -> List[Dict[str, Any]]:
        """Datapoints for one metric; ``None`` returns the whole retained series."""
        points = self.series.get(name, [])
        if time_period_minutes is None:
            return list(points)
        cutoff = time.time() - time_period_minutes * 60
        return [dp for dp in points if dp["timestamp"] >= cutoff]

    def get_all_metrics(self, time_period_minutes: Optional[int] = 60) -> Dict[str, Any]:
        return {
            "service": self.service_name,
            "timestamp": time.time(),
            "counters": dict(self.counters),
            "gauges": dict(self.gauges),
            "time_series": {
                name: self.get_metric_data(name, time_period_minutes)
                for name in self.series
            },
        }
