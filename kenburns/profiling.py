"""
Timing statistics for the per-frame render stages.

Disabled by default; KenBurnsConfig(profile=True) turns it on for a render.
"""

import time
from functools import wraps
from collections import defaultdict
from typing import Dict
import atexit


class Profiler:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self.stats: Dict[str, Dict] = defaultdict(lambda: {
            'calls': 0,
            'total_time': 0.0,
            'max_time': 0.0,
        })
        self.enabled = False
        atexit.register(self.print_stats)

    def record(self, name: str, elapsed: float):
        if not self.enabled:
            return
        entry = self.stats[name]
        entry['calls'] += 1
        entry['total_time'] += elapsed
        entry['max_time'] = max(entry['max_time'], elapsed)

    def print_stats(self):
        if not self.stats:
            return

        print("\n" + "=" * 70)
        print("RENDER PROFILING RESULTS")
        print("=" * 70)

        sorted_stats = sorted(
            self.stats.items(),
            key=lambda x: x[1]['total_time'],
            reverse=True
        )

        print(f"{'Stage':<35} {'Calls':>8} {'Total(s)':>8} {'Avg(ms)':>8} {'Max(ms)':>8}")
        print("-" * 70)

        for name, data in sorted_stats:
            calls = data['calls']
            total = data['total_time']
            avg_ms = (total / calls * 1000) if calls > 0 else 0
            print(f"{name:<35} {calls:>8} {total:>8.3f} {avg_ms:>8.2f} {data['max_time'] * 1000:>8.2f}")

        print("=" * 70)

    def reset(self):
        self.stats.clear()


profiler = Profiler()


def profile(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not profiler.enabled:
            return func(*args, **kwargs)
        start = time.perf_counter()
        result = func(*args, **kwargs)
        profiler.record(func.__qualname__, time.perf_counter() - start)
        return result
    return wrapper


class profile_block:
    def __init__(self, name: str):
        self.name = name
        self.start = None

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args):
        profiler.record(self.name, time.perf_counter() - self.start)
