"""
Conflict-scan benchmark — how the scheduling core scales with board size.

The conflict check runs on every drop and every resize release, against
the whole job collection. This measures, for a synthetic board of N jobs
spread over T technicians and a week:

- find_conflict:  one candidate window checked against every job
- find_overlaps:  the sorted pairwise audit over the whole collection
- project:        bucketing every job into a week grid

Everything runs in-process on plain dataclasses (no API, no database),
so the numbers are the cost of the algorithms themselves.

Usage:
    python -m benchmarks.conflict_scan                       # 1000 jobs, 10 technicians
    python -m benchmarks.conflict_scan --num-jobs 10000
    python -m benchmarks.conflict_scan --num-jobs 5000 --technicians 50 --repeat 50
"""

import argparse
import json
import random
import time
from datetime import date, datetime, timedelta, timezone

from models.enums import JobStatus, ViewMode
from scheduler.base import ScheduledJob, Resource
from scheduler.conflicts import find_conflict, find_overlaps
from scheduler.grid import GridView, project

WEEK_START = date(2026, 10, 18)


class ConflictScanBenchmark:

    def __init__(self, num_jobs: int = 1000, technicians: int = 10, seed: int = 7):
        self.num_jobs = num_jobs
        self.resources = [Resource(f"tech-{i}", f"Technician {i}") for i in range(technicians)]
        self.rng = random.Random(seed)
        self.jobs = self.build_board()

    def build_board(self) -> list[ScheduledJob]:
        """Random jobs on quarter-hour starts between 06:00 and 19:45, 15–180 minutes long."""
        jobs = []
        for i in range(self.num_jobs):
            day = WEEK_START + timedelta(days=self.rng.randrange(7))
            start = datetime(day.year, day.month, day.day, tzinfo=timezone.utc) + timedelta(
                minutes=6 * 60 + 15 * self.rng.randrange(56)
            )
            minutes = 15 * self.rng.randint(1, 12)
            jobs.append(ScheduledJob(
                id=f"job-{i}",
                job_number=f"J-{i}",
                resource_id=self.rng.choice(self.resources).id,
                scheduled_start=start,
                scheduled_end=start + timedelta(minutes=minutes),
                status=JobStatus.SCHEDULED,
            ))
        return jobs

    def _time(self, fn, repeat: int) -> float:
        """Mean milliseconds per call."""
        start = time.perf_counter()
        for _ in range(repeat):
            fn()
        return (time.perf_counter() - start) / repeat * 1000

    def run(self, repeat: int = 20) -> dict:
        probe_start = datetime(2026, 10, 21, 14, 0, tzinfo=timezone.utc)
        probe_end = probe_start + timedelta(hours=1)
        resource_id = self.resources[0].id
        grid_view = GridView(ViewMode.WEEK, WEEK_START)

        return {
            "num_jobs": self.num_jobs,
            "technicians": len(self.resources),
            "overlapping_pairs": len(find_overlaps(self.jobs)),
            "find_conflict_ms": round(self._time(
                lambda: find_conflict(self.jobs, resource_id, probe_start, probe_end), repeat
            ), 3),
            "find_overlaps_ms": round(self._time(lambda: find_overlaps(self.jobs), repeat), 3),
            "project_week_ms": round(self._time(
                lambda: project(self.jobs, grid_view, self.resources), repeat
            ), 3),
        }


def main():
    parser = argparse.ArgumentParser(description="Scheduling core conflict-scan benchmark")
    parser.add_argument(
        "--num-jobs", type=int, default=1000,
        help="Number of jobs on the synthetic board (default: 1000)",
    )
    parser.add_argument(
        "--technicians", type=int, default=10,
        help="Number of technician columns (default: 10)",
    )
    parser.add_argument(
        "--repeat", type=int, default=20,
        help="Calls per measurement (default: 20)",
    )
    args = parser.parse_args()

    print("=== Conflict Scan Benchmark ===")
    print(f"Jobs: {args.num_jobs} | Technicians: {args.technicians}\n")

    result = ConflictScanBenchmark(args.num_jobs, args.technicians).run(args.repeat)

    print(json.dumps(result, indent=2))

    print("\n{:<18} {:>12}".format("Operation", "ms / call"))
    print("-" * 31)
    for key in ("find_conflict_ms", "find_overlaps_ms", "project_week_ms"):
        print("{:<18} {:>12.3f}".format(key.removesuffix("_ms"), result[key]))


if __name__ == "__main__":
    main()
