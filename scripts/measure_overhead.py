#!/usr/bin/env python3
"""Measure the per-call cost of start/stop on a shared stopwatch."""
from __future__ import annotations

import argparse
import logging
import sys
import threading
import time
from pathlib import Path
from typing import List

import numpy as np
from tqdm import tqdm

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from labeled_stopwatch import SharedStopwatch, StopwatchConfig

LOGGER = logging.getLogger("measure_overhead")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Measure start/stop overhead of SharedStopwatch.")
    parser.add_argument("--iterations", type=int, default=10000, help="start/stop pairs per thread")
    parser.add_argument("--threads", type=int, default=4)
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser.parse_args()


def run_worker(stopwatch: SharedStopwatch, worker_id: int, iterations: int, out: List[float], bar: tqdm) -> None:
    label = f"worker-{worker_id}"
    for _ in range(iterations):
        begin = time.perf_counter_ns()
        stopwatch.start(label)
        stopwatch.stop(label)
        out.append((time.perf_counter_ns() - begin) / 1_000.0)
        bar.update(1)


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    if args.iterations <= 0 or args.threads <= 0:
        raise ValueError("--iterations and --threads must be positive")

    stopwatch = SharedStopwatch(StopwatchConfig(silent=True))
    samples: List[List[float]] = [[] for _ in range(args.threads)]
    total = args.iterations * args.threads
    LOGGER.info("Running %d start/stop pairs on %d threads", total, args.threads)

    with tqdm(total=total, desc="start/stop") as bar:
        workers = [
            threading.Thread(target=run_worker, args=(stopwatch, i, args.iterations, samples[i], bar))
            for i in range(args.threads)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

    if len(stopwatch):
        LOGGER.warning("Timers still running after the run: %s", stopwatch.labels())

    costs = np.concatenate([np.asarray(s, dtype=np.float64) for s in samples])
    p50, p99 = np.percentile(costs, [50, 99])
    print(
        f"[measure_overhead] pairs={costs.size} "
        f"mean={costs.mean():.3f}us p50={p50:.3f}us p99={p99:.3f}us max={costs.max():.3f}us"
    )


if __name__ == "__main__":
    main()
