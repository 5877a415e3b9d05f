#!/usr/bin/env python3
"""Benchmark suite for pyveb comparing against a skip-list baseline."""

import argparse
import json
import logging
import random
import time
from pathlib import Path
from typing import Dict, List, Protocol

import numpy as np
import plotly.graph_objects as go
from tqdm import tqdm

from pyveb import VEBTree
from pyveb.check import check_correctness
from pyveb.skiplist import SkipListSet


class OrderedIntSet(Protocol):
    def add(self, x: int) -> None: ...
    def discard(self, x: int) -> None: ...
    def successor(self, x: int) -> int: ...


class Metrics:
    def __init__(self):
        self.insert_latencies: List[float] = []
        self.erase_latencies: List[float] = []
        self.successor_latencies: List[float] = []
        self.checksum = 0
        self.total_seconds = 0.0

    def to_dict(self) -> Dict:
        def pct(samples: List[float]) -> Dict:
            if not samples:
                return {}
            return {
                "p50": float(np.percentile(samples, 50)),
                "p95": float(np.percentile(samples, 95)),
                "p99": float(np.percentile(samples, 99)),
                "mean": float(np.mean(samples)),
            }

        return {
            "insert_latencies": pct(self.insert_latencies),
            "erase_latencies": pct(self.erase_latencies),
            "successor_latencies": pct(self.successor_latencies),
            "checksum": self.checksum,
            "total_seconds": self.total_seconds,
        }

    def plot_latencies(self, title: str, output_path: Path):
        fig = go.Figure()
        for name, samples in (
            ("Insert", self.insert_latencies),
            ("Erase", self.erase_latencies),
            ("Successor", self.successor_latencies),
        ):
            fig.add_trace(go.Box(y=samples, name=f"{name} Latency", boxpoints="outliers"))

        fig.update_layout(
            title=title,
            yaxis_title="Latency (us)",
            boxmode="group"
        )

        fig.write_html(output_path)


class BenchmarkSuite:
    def __init__(self, universe: int, insertions: int, erases: int, successors: int, seed: int):
        self.universe = universe
        rng = random.Random(seed)
        # Same key streams for every structure so checksums are comparable.
        self._inserts = [rng.randrange(universe) for _ in range(insertions)]
        self._erases = [rng.randrange(universe) for _ in range(erases)]
        self._queries = [rng.randrange(universe) for _ in range(successors)]

    def run(self, name: str, s: OrderedIntSet) -> Metrics:
        metrics = Metrics()
        started = time.perf_counter()

        for x in tqdm(self._inserts, desc=f"{name} Insert"):
            start = time.perf_counter()
            s.add(x)
            metrics.insert_latencies.append((time.perf_counter() - start) * 1e6)

        for x in tqdm(self._erases, desc=f"{name} Erase"):
            start = time.perf_counter()
            s.discard(x)
            metrics.erase_latencies.append((time.perf_counter() - start) * 1e6)

        for x in tqdm(self._queries, desc=f"{name} Successor"):
            start = time.perf_counter()
            metrics.checksum += s.successor(x)
            metrics.successor_latencies.append((time.perf_counter() - start) * 1e6)

        metrics.total_seconds = time.perf_counter() - started
        return metrics


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--universe", type=int, default=1 << 20, help="Universe size U")
    parser.add_argument("--insertions", type=int, default=200000, help="Number of random inserts")
    parser.add_argument("--erases", type=int, default=200000, help="Number of random erases")
    parser.add_argument("--successors", type=int, default=200000, help="Number of random successor queries")
    parser.add_argument("--policy", choices=["generic", "power2"], default="generic", help="Split policy")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--baseline", action=argparse.BooleanOptionalAction, default=True, help="Also time the skip-list baseline")
    parser.add_argument("--check", action="store_true", help="Run the randomized correctness check first")
    parser.add_argument("--output", type=Path, default=Path("benchmark_results"), help="Output directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    args.output.mkdir(parents=True, exist_ok=True)

    if args.check:
        check_universe = 4096 if args.policy == "power2" else 5000
        for i in range(100):
            if not check_correctness(check_universe, random.randrange(1000), policy=args.policy):
                print(f"Correctness check #{i} failed")
                raise SystemExit(1)
        print("All correctness checks passed!")

    suite = BenchmarkSuite(args.universe, args.insertions, args.erases, args.successors, args.seed)

    # pyveb
    tree = VEBTree(args.universe, policy=args.policy)
    veb_metrics = suite.run("VEB", tree)
    tree.destroy()
    print(f"VEB checksum: {veb_metrics.checksum} ({veb_metrics.total_seconds:.2f}s)")

    # Skip list (if requested)
    baseline_metrics = suite.run("SkipList", SkipListSet(seed=args.seed)) if args.baseline else None
    if baseline_metrics is not None:
        print(f"SkipList checksum: {baseline_metrics.checksum} ({baseline_metrics.total_seconds:.2f}s)")

    # Generate reports
    veb_metrics.plot_latencies(
        "pyveb Latency Distribution",
        args.output / "veb_latencies.html"
    )

    # Save metrics
    with open(args.output / "metrics.json", "w") as f:
        json.dump({
            "universe": args.universe,
            "policy": args.policy,
            "veb": veb_metrics.to_dict(),
            "skiplist": baseline_metrics.to_dict() if baseline_metrics else None,
        }, f, indent=2)


if __name__ == "__main__":
    main()
