#!/usr/bin/env python3
"""
Monte Carlo Page Fault Simulator
Estimates the average page faults of LRU, FIFO and Clock over a range of
working set sizes, using synthetic normally distributed reference traces
"""

import argparse
import random
import sys
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Dict, List, Optional, Tuple

import numpy as np

from replacement import POLICIES
from results import plot_results, print_summary, results_file_name, write_results
from tracegen import ReferenceTraceGenerator

# Simulation constants
TRIALS = 1000          # traces generated per run
TRACE_LENGTH = 1000    # references per trace
SET_SIZE_LOWER = 4
SET_SIZE_UPPER = 20
TRACE_MEAN = 10
TRACE_SD = 2

EXIT_OK = 0
EXIT_OUTPUT_ERROR = 1


def average_faults(sums, trial_count: int):
    """Integer average of accumulated fault counts (floor division)"""
    return np.asarray(sums, dtype=np.int64) // trial_count


class MonteCarloDriver:
    """Runs every policy over every working set size on repeated random traces"""

    def __init__(self, trial_count: int = TRIALS, trace_length: int = TRACE_LENGTH,
                 wss_lower: int = SET_SIZE_LOWER, wss_upper: int = SET_SIZE_UPPER,
                 mean: float = TRACE_MEAN, sd: float = TRACE_SD,
                 rng: Optional[random.Random] = None, workers: int = 1,
                 deadline: Optional[float] = None, count_cold_misses: bool = False,
                 quiet: bool = False):
        if trial_count < 1:
            raise ValueError(f"Trial count must be at least 1, got {trial_count}")
        if trace_length < 1:
            raise ValueError(f"Trace length must be at least 1, got {trace_length}")
        if not 1 <= wss_lower <= wss_upper:
            raise ValueError(f"Invalid working set range {wss_lower}..{wss_upper}")
        if sd < 0:
            raise ValueError(f"Standard deviation must not be negative, got {sd}")
        if workers < 1:
            raise ValueError(f"Worker count must be at least 1, got {workers}")

        self.trial_count = trial_count
        self.trace_length = trace_length
        self.wss_lower = wss_lower
        self.wss_upper = wss_upper
        self.mean = mean
        self.sd = sd
        self.rng = rng if rng is not None else random.Random()
        self.workers = workers
        self.deadline = deadline
        self.count_cold_misses = count_cold_misses
        self.quiet = quiet

        self.generator = ReferenceTraceGenerator(mean, sd, self.rng)
        self.policy_names: List[str] = list(POLICIES)
        self.completed_trials = 0

    def run_trial(self, trace: List[int]) -> np.ndarray:
        """Fault counts of one trace, indexed [policy, wss]"""
        faults = np.zeros((len(self.policy_names), self.wss_upper + 1), dtype=np.int64)
        for wss in range(self.wss_lower, self.wss_upper + 1):
            for row, name in enumerate(self.policy_names):
                policy = POLICIES[name](wss, count_cold_misses=self.count_cold_misses)
                faults[row, wss] = policy.simulate(trace)
        return faults

    def accumulate(self, trials: int, stop_at: Optional[float] = None) -> Tuple[np.ndarray, int]:
        """
        Run up to `trials` trials sequentially.
        Returns (fault sums, trials completed). No new trial starts once the
        wall-clock time passes stop_at; the first trial always runs.
        """
        sums = np.zeros((len(self.policy_names), self.wss_upper + 1), dtype=np.int64)
        completed = 0
        for _ in range(trials):
            if completed and stop_at is not None and time.time() >= stop_at:
                break
            trace = self.generator.generate(self.trace_length)
            # Sums only change once the whole trial is done
            sums += self.run_trial(trace)
            completed += 1
            self._report_progress(completed, trials)
        return sums, completed

    def run(self) -> Dict[str, Dict[int, int]]:
        """Run all trials and return {policy: {wss: average faults}}"""
        stop_at = time.time() + self.deadline if self.deadline is not None else None

        if self.workers == 1:
            sums, completed = self.accumulate(self.trial_count, stop_at)
        else:
            sums, completed = self._accumulate_parallel(stop_at)

        self.completed_trials = completed
        averages = average_faults(sums, completed)
        return {
            name: {wss: int(averages[row, wss])
                   for wss in range(self.wss_lower, self.wss_upper + 1)}
            for row, name in enumerate(self.policy_names)
        }

    def _accumulate_parallel(self, stop_at: Optional[float]) -> Tuple[np.ndarray, int]:
        """Split the trials into one batch per worker, each with its own seeded stream"""
        base, extra = divmod(self.trial_count, self.workers)
        batches = [base + (1 if i < extra else 0) for i in range(self.workers)]
        batches = [size for size in batches if size > 0]
        settings = {
            "trace_length": self.trace_length,
            "wss_lower": self.wss_lower,
            "wss_upper": self.wss_upper,
            "mean": self.mean,
            "sd": self.sd,
            "count_cold_misses": self.count_cold_misses,
        }

        sums = np.zeros((len(self.policy_names), self.wss_upper + 1), dtype=np.int64)
        completed = 0
        with ProcessPoolExecutor(max_workers=len(batches)) as executor:
            futures = [
                executor.submit(_run_batch, settings, size, self.rng.randrange(2 ** 32), stop_at)
                for size in batches
            ]
            # Reduction happens here only, never inside a worker
            for future in as_completed(futures):
                batch_sums, batch_completed = future.result()
                sums += batch_sums
                completed += batch_completed
                self._report_progress(completed, self.trial_count)
        return sums, completed

    def _report_progress(self, done: int, total: int):
        if self.quiet:
            return
        end = "\n" if done % 5 == 0 or done == total else "\t"
        print(f"Running traces... ({done}/{total})", end=end, flush=True)


def _run_batch(settings: Dict, trials: int, seed: int,
               stop_at: Optional[float]) -> Tuple[np.ndarray, int]:
    driver = MonteCarloDriver(trial_count=trials, rng=random.Random(seed), quiet=True, **settings)
    return driver.accumulate(trials, stop_at)


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> Tuple[argparse.ArgumentParser, argparse.Namespace]:
    parser = argparse.ArgumentParser(
        description="Monte Carlo comparison of LRU, FIFO and Clock page replacement"
    )
    parser.add_argument("--trials", "-n", type=positive_int, default=TRIALS)
    parser.add_argument("--trace-length", "-t", type=positive_int, default=TRACE_LENGTH)
    parser.add_argument("--wss-lower", type=positive_int, default=SET_SIZE_LOWER)
    parser.add_argument("--wss-upper", type=positive_int, default=SET_SIZE_UPPER)
    parser.add_argument("--mean", type=float, default=TRACE_MEAN)
    parser.add_argument("--sd", type=float, default=TRACE_SD)
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the random source (default: current time)")
    parser.add_argument("--workers", "-w", type=positive_int, default=1)
    parser.add_argument("--deadline", type=float, default=None,
                        help="stop starting new trials after this many seconds")
    parser.add_argument("--count-cold-misses", action="store_true",
                        help="also count misses that fill a free slot as faults")
    parser.add_argument("--output-dir", "-o", default="")
    parser.add_argument("--plot", action="store_true",
                        help="also save the fault curves as a PNG")
    parser.add_argument("--quiet", "-q", action="store_true")
    return parser, parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main simulation function"""
    parser, args = parse_args(argv)
    started_at = time.localtime()
    seed = args.seed if args.seed is not None else int(time.time())

    try:
        driver = MonteCarloDriver(
            trial_count=args.trials,
            trace_length=args.trace_length,
            wss_lower=args.wss_lower,
            wss_upper=args.wss_upper,
            mean=args.mean,
            sd=args.sd,
            rng=random.Random(seed),
            workers=args.workers,
            deadline=args.deadline,
            count_cold_misses=args.count_cold_misses,
            quiet=args.quiet,
        )
    except ValueError as e:
        parser.error(str(e))

    if not args.quiet:
        print("Monte Carlo Page Fault Simulator")
        print("=" * 50)
        print(f"Trials: {args.trials}, Trace Length: {args.trace_length}, "
              f"WSS: {args.wss_lower}-{args.wss_upper}, Seed: {seed}")
        print("-" * 50)

    results = driver.run()

    file_name = results_file_name(started_at, args.output_dir)
    try:
        write_results(file_name, results)
    except OSError:
        print(f"ERROR: Failed to create file {file_name}")
        return EXIT_OUTPUT_ERROR

    if args.plot:
        plot_name = file_name[:-len(".csv")] + ".png"
        try:
            plot_results(plot_name, results)
        except OSError:
            print(f"ERROR: Failed to create file {plot_name}")
            return EXIT_OUTPUT_ERROR

    if not args.quiet:
        if driver.completed_trials < args.trials:
            print(f"Deadline reached after {driver.completed_trials} of {args.trials} trials")
        print_summary(results)
        print(f"\nResults written to {file_name}")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
