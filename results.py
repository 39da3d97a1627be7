#!/usr/bin/env python3
"""
Results output for the Monte Carlo page fault experiment
"""

import csv
import os
import time
from typing import Dict, List, Optional

import matplotlib.pyplot as plt

FILE_NAME_FORMAT = "Pgm3_%m-%d-%Y_%H:%M:%S.csv"
HEADER = ["wss", "LRU", "FIFO", "Clock"]


def results_file_name(started_at: Optional[time.struct_time] = None,
                      output_dir: str = "") -> str:
    """Output path named after the wall-clock time the run started"""
    if started_at is None:
        started_at = time.localtime()
    return os.path.join(output_dir, time.strftime(FILE_NAME_FORMAT, started_at))


def result_rows(results: Dict[str, Dict[int, int]]) -> List[List[int]]:
    """One [wss, LRU, FIFO, Clock] row per working set size, in wss order"""
    policies = HEADER[1:]
    sizes = sorted(results[policies[0]])
    return [[wss] + [results[name][wss] for name in policies] for wss in sizes]


def write_results(path: str, results: Dict[str, Dict[int, int]]) -> str:
    """
    Write the averaged fault counts as a CSV table.
    Raises OSError if the file cannot be created.
    """
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(HEADER)
        writer.writerows(result_rows(results))
    return path


def plot_results(path: str, results: Dict[str, Dict[int, int]]) -> str:
    """Save the fault curves of every policy as an image"""
    rows = result_rows(results)
    sizes = [row[0] for row in rows]

    fig = plt.figure(figsize=(8, 5))
    for column, (name, marker) in enumerate(zip(HEADER[1:], ["o", "s", "x"]), start=1):
        plt.plot(sizes, [row[column] for row in rows], label=name, marker=marker)
    plt.xlabel("Working Set Size")
    plt.ylabel("Average Page Faults")
    plt.title("Average Page Faults vs Working Set Size")
    plt.legend()
    plt.grid(True)
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def print_summary(results: Dict[str, Dict[int, int]]):
    """Print the results table to the console"""
    print(f"\n=== Average Page Faults ===")
    print(f"{'WSS':<6} {'LRU':<8} {'FIFO':<8} {'Clock':<8}")
    print("-" * 32)
    for wss, lru, fifo, clock in result_rows(results):
        print(f"{wss:<6} {lru:<8} {fifo:<8} {clock:<8}")
