"""Concurrent schedule search for dhsched.

Worker threads repeatedly run one trial each:
    generate -> validate -> score -> offer to the leaderboard
until enough valid schedules have been found, an operator cap is hit, or
the search is cancelled. Workers share nothing but a SearchStats (counters)
and a Leaderboard (bounded best-K), both guarded by their own locks.
"""

import itertools
import random
import threading
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Optional

from dhsched.config import SeasonConfig, Violation, check_feasibility
from dhsched.constraints import is_valid
from dhsched.models import Game, Result
from dhsched.roundrobin import generate_matchups
from dhsched.scheduler import MAX_FILL_ATTEMPTS, generate_schedule
from dhsched.scoring import score_schedule


class InfeasibleConfigError(Exception):
    """The pre-flight feasibility check failed; no trial was run."""

    def __init__(self, violations: list[Violation]):
        self.violations = list(violations)
        super().__init__(
            "; ".join(v.message for v in self.violations)
            or "configuration is infeasible"
        )


@dataclass
class SearchStats:
    """Shared run counters.

    Writers go through the increment methods. Readers (progress display)
    may read the attributes directly and accept slightly stale values.
    """
    total_attempts: int = 0
    valid_attempts: int = 0
    best_score: Optional[int] = None
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def record_attempt(self) -> int:
        with self._lock:
            self.total_attempts += 1
            return self.total_attempts

    def record_valid(self, score: int, min_score: int) -> int:
        with self._lock:
            self.valid_attempts += 1
            if score >= min_score and (
                self.best_score is None or score > self.best_score
            ):
                self.best_score = score
            return self.valid_attempts

    @property
    def elapsed(self) -> float:
        if self.started_at is None:
            return 0.0
        end = self.finished_at if self.finished_at is not None else time.monotonic()
        return end - self.started_at

    @property
    def rate(self) -> float:
        elapsed = self.elapsed
        return self.total_attempts / elapsed if elapsed > 0 else 0.0

    @property
    def valid_rate(self) -> float:
        elapsed = self.elapsed
        return self.valid_attempts / elapsed if elapsed > 0 else 0.0

    @property
    def valid_percent(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.valid_attempts * 100.0 / self.total_attempts


class Leaderboard:
    """The best `capacity` distinct results seen, highest score first."""

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1 (got {capacity})")
        self.capacity = capacity
        self._lock = threading.Lock()
        self._results: list[Result] = []
        self._keys: list[frozenset[Game]] = []

    def offer(self, result: Result) -> bool:
        """Insert result, evicting the lowest score beyond capacity.

        Returns True if the result is held after the call.
        """
        key = frozenset(result.schedule)
        with self._lock:
            if key in self._keys:
                return False
            self._results.append(result)
            self._keys.append(key)
            # Stable sort: among equal scores the earlier arrival ranks first
            order = sorted(
                range(len(self._results)),
                key=lambda i: self._results[i].score,
                reverse=True,
            )
            self._results = [self._results[i] for i in order]
            self._keys = [self._keys[i] for i in order]
            while len(self._results) > self.capacity:
                evicted = self._results.pop()
                self._keys.pop()
                if evicted is result:
                    return False
            return True

    def results(self) -> list[Result]:
        """Snapshot, highest score first."""
        with self._lock:
            return list(self._results)

    @property
    def lowest_score(self) -> Optional[int]:
        with self._lock:
            return self._results[-1].score if self._results else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)


ProgressCallback = Callable[[SearchStats], None]


class SearchEngine:
    """Runs trials across a worker pool toward config.target_valid schedules."""

    def __init__(self, config: SeasonConfig, seed: Optional[int] = None,
                 fill_attempts: int = MAX_FILL_ATTEMPTS):
        self.config = config
        self.fill_attempts = fill_attempts
        self.matchups = generate_matchups(config.total_teams)
        self.stats = SearchStats()
        self.leaderboard = Leaderboard(config.save_top)
        self._cancelled = threading.Event()
        self._done = threading.Event()
        self._max_attempts: Optional[int] = None
        self._deadline: Optional[float] = None

        if seed is None:
            seed = config.seed
        if seed is None:
            seed = time.time_ns() // 1_000_000
        self._seeds = itertools.count(seed)

    def cancel(self):
        """Ask every worker to stop after its current trial."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def new_rng(self) -> random.Random:
        """A fresh random source with the next seed in this engine's sequence."""
        return random.Random(next(self._seeds))

    def run_trial(self, rng: random.Random) -> Optional[Result]:
        """One generate/validate/score/offer cycle.

        Returns the Result if the schedule passed validation, else None.
        """
        games = generate_schedule(
            self.config, self.matchups, rng,
            max_attempts=self.fill_attempts, cancelled=self._cancelled,
        )
        self.stats.record_attempt()

        if games is None:
            return None
        if not is_valid(games, self.config):
            return None

        score = score_schedule(games, self.config)
        result = Result(schedule=tuple(games), score=score)
        if score >= self.config.min_score:
            self.leaderboard.offer(result)
        self.stats.record_valid(score, self.config.min_score)
        return result

    def _should_stop(self) -> bool:
        if self._cancelled.is_set():
            return True
        if self.stats.valid_attempts >= self.config.target_valid:
            return True
        if (self._max_attempts is not None
                and self.stats.total_attempts >= self._max_attempts):
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return True
        return False

    def _worker(self, rng: random.Random):
        while not self._should_stop():
            self.run_trial(rng)

    def _report(self, progress: ProgressCallback, interval: float):
        while not self._done.wait(interval):
            progress(self.stats)

    def run(self, max_attempts: Optional[int] = None,
            time_limit: Optional[float] = None,
            progress: Optional[ProgressCallback] = None,
            progress_interval: float = 1.0) -> list[Result]:
        """Search until the target, a cap, or cancellation.

        max_attempts and time_limit (seconds) are operator caps for configs
        whose target may be unreachable. Returns the leaderboard, best first.
        Raises InfeasibleConfigError before starting if the config cannot
        produce a schedule.
        """
        violations = check_feasibility(self.config)
        if violations:
            raise InfeasibleConfigError(violations)

        self._max_attempts = max_attempts
        self.stats.started_at = time.monotonic()
        self._deadline = (self.stats.started_at + time_limit
                          if time_limit is not None else None)
        self._done.clear()

        reporter = None
        if progress is not None:
            reporter = threading.Thread(
                target=self._report, args=(progress, progress_interval),
                daemon=True,
            )
            reporter.start()

        # One random source per worker, created up front and never shared
        rngs = [self.new_rng() for _ in range(self.config.max_workers)]

        try:
            with ThreadPoolExecutor(max_workers=self.config.max_workers,
                                    thread_name_prefix="dhsched") as executor:
                futures = [executor.submit(self._worker, rng) for rng in rngs]
                try:
                    pending = futures
                    while pending:
                        done, pending = wait(pending, timeout=0.25,
                                             return_when=FIRST_EXCEPTION)
                        if any(f.exception() is not None for f in done):
                            self.cancel()
                except KeyboardInterrupt:
                    self.cancel()
                    raise
                for f in futures:
                    f.result()
        finally:
            self.stats.finished_at = time.monotonic()
            self._done.set()
            if reporter is not None:
                reporter.join()

        return self.leaderboard.results()


def run_search(config: SeasonConfig, **kwargs) -> tuple[list[Result], SearchStats]:
    """Build an engine, run it and return (ranked results, final stats)."""
    seed = kwargs.pop("seed", None)
    engine = SearchEngine(config, seed=seed)
    results = engine.run(**kwargs)
    return results, engine.stats
