"""Prometheus metrics for metadata loading, entity mapping and identity lookups.

Provides:
- metadata_loads_total: definition file loads by outcome
- mapping_events_total: SyncEvents produced by remote type and action
- identity_lookups_total: remote/local identity resolutions by descriptor kind
- track_metadata_load(): context manager timing a load and recording its outcome
"""

from __future__ import annotations

import time
from collections.abc import Generator
from contextlib import contextmanager

from prometheus_client import Counter, Histogram

# ── Metadata Metrics ─────────────────────────────────────────────────────────

metadata_loads_total = Counter(
    "salesforce_metadata_loads_total",
    "Total mapping definition loads",
    ["outcome"],
)

metadata_load_duration_seconds = Histogram(
    "salesforce_metadata_load_duration_seconds",
    "Time spent locating and parsing a mapping definition",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

# ── Mapping Metrics ──────────────────────────────────────────────────────────

mapping_events_total = Counter(
    "salesforce_mapping_events_total",
    "Total SyncEvents produced from local entities",
    ["remote_type", "action"],
)

identity_lookups_total = Counter(
    "salesforce_identity_lookups_total",
    "Total identity resolutions between local entities and remote ids",
    ["kind", "outcome"],
)


@contextmanager
def track_metadata_load() -> Generator[None, None, None]:
    """Time a metadata load and count it as success or error."""
    start = time.monotonic()
    try:
        yield
    except Exception:
        metadata_loads_total.labels(outcome="error").inc()
        raise
    else:
        metadata_loads_total.labels(outcome="success").inc()
    finally:
        metadata_load_duration_seconds.observe(time.monotonic() - start)
