"""
Notes API - List Latency Benchmark
==================================

What:  Measures GET /v1/notes latency for the unfiltered and tag-filtered
       list shapes against a running server.
How:   httpx.AsyncClient with a fixed number of concurrent workers sharing a
       request budget, after a sequential warm-up. Reports avg / p50 / p95.

Seed first so the filters have something to match:
    python -m notes_api.seed --count 100000
    python -m notes_api.bench --base-url http://localhost:8000 --requests 500
"""

import argparse
import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

import httpx

from notes_api.seed import _positive_int

logger = logging.getLogger("notes_api.bench")

QueryParams = List[Tuple[str, Union[str, int]]]


@dataclass(frozen=True)
class Scenario:
    name: str
    path: str
    params: QueryParams = field(default_factory=list)


@dataclass
class ScenarioResult:
    scenario: str
    requests: int
    errors: int
    avg_ms: float
    p50_ms: float
    p95_ms: float


# Tags come from the seed tool's pool
SCENARIOS = [
    Scenario("notes_no_filter", "/v1/notes", [("limit", 20)]),
    Scenario("notes_tags_any", "/v1/notes",
             [("limit", 20), ("tagsAny", "fastapi"), ("tagsAny", "backend")]),
    Scenario("notes_tags_all", "/v1/notes",
             [("limit", 20), ("tagsAll", "fastapi"), ("tagsAll", "backend")]),
    Scenario("notes_tags_mix", "/v1/notes",
             [("limit", 20), ("tagsAny", "sqlalchemy"), ("tagsAll", "db")]),
]


def percentile(values: Sequence[float], p: float) -> float:
    """Nearest-rank percentile; 0.0 for no samples."""
    if not values:
        return 0.0
    ordered = sorted(values)
    rank = -(-p * len(ordered) // 100)  # ceil
    return ordered[max(0, int(rank) - 1)]


async def run_scenario(
    client: httpx.AsyncClient,
    scenario: Scenario,
    requests: int,
    concurrency: int,
    warmup: int,
) -> ScenarioResult:
    """Warm up sequentially, then spread `requests` over `concurrency` workers."""
    latencies: List[float] = []
    errors = 0
    remaining = requests

    async def run_one() -> None:
        nonlocal errors
        started = time.perf_counter()
        response = await client.get(scenario.path, params=scenario.params)
        await response.aread()
        latencies.append((time.perf_counter() - started) * 1000)
        if response.is_error:
            errors += 1

    for _ in range(warmup):
        await run_one()
    latencies.clear()
    errors = 0

    async def worker() -> None:
        nonlocal remaining
        while remaining > 0:
            remaining -= 1
            await run_one()

    await asyncio.gather(*(worker() for _ in range(concurrency)))

    avg = sum(latencies) / len(latencies) if latencies else 0.0
    return ScenarioResult(
        scenario=scenario.name,
        requests=len(latencies),
        errors=errors,
        avg_ms=round(avg, 3),
        p50_ms=round(percentile(latencies, 50), 3),
        p95_ms=round(percentile(latencies, 95), 3),
    )


async def run_benchmark(
    base_url: str,
    requests: int,
    concurrency: int,
    warmup: int,
    scenarios: Sequence[Scenario] = SCENARIOS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[ScenarioResult]:
    """Run every scenario in turn against `base_url`."""
    limits = httpx.Limits(max_connections=concurrency)
    async with httpx.AsyncClient(
        base_url=base_url, transport=transport, limits=limits, timeout=30.0
    ) as client:
        results = []
        for scenario in scenarios:
            result = await run_scenario(client, scenario, requests, concurrency, warmup)
            logger.info("%s done: %d requests, %d errors", scenario.name, result.requests, result.errors)
            results.append(result)
        return results


def format_table(results: Sequence[ScenarioResult]) -> str:
    header = f"{'scenario':<18} {'requests':>8} {'errors':>6} {'avg_ms':>9} {'p50_ms':>9} {'p95_ms':>9}"
    rows = [
        f"{r.scenario:<18} {r.requests:>8} {r.errors:>6} {r.avg_ms:>9.3f} {r.p50_ms:>9.3f} {r.p95_ms:>9.3f}"
        for r in results
    ]
    return "\n".join([header, *rows])


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, default))


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m notes_api.bench",
        description="Measure list-notes latency against a running server.",
    )
    parser.add_argument("--base-url", default=os.environ.get("BENCH_BASE_URL", "http://localhost:8000"))
    parser.add_argument("--requests", type=_positive_int, default=_env_int("BENCH_REQUESTS", 500))
    parser.add_argument("--concurrency", type=_positive_int, default=_env_int("BENCH_CONCURRENCY", 20))
    parser.add_argument("--warmup", type=int, default=_env_int("BENCH_WARMUP", 50))
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    results = asyncio.run(
        run_benchmark(args.base_url, args.requests, args.concurrency, args.warmup)
    )
    print(format_table(results))


if __name__ == "__main__":
    main()
