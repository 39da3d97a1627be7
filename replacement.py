#!/usr/bin/env python3
"""
Page Replacement Policies
Implements the working-set frame and the LRU, FIFO and Clock replacement engines
"""

from typing import Dict, List, Optional, Tuple


class WorkingSetFrame:
    """Fixed-capacity container of resident pages"""

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"Frame capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.slots: List[int] = []  # occupied slots, in slot order

    @property
    def occupied(self) -> int:
        return len(self.slots)

    def is_full(self) -> bool:
        return len(self.slots) == self.capacity

    def contains(self, page_num: int) -> bool:
        """True if any occupied slot holds page_num"""
        for page in self.slots:
            if page == page_num:
                return True
        return False

    def index_of(self, page_num: int) -> Optional[int]:
        """First slot holding page_num, scanning from slot 0, or None"""
        for i, page in enumerate(self.slots):
            if page == page_num:
                return i
        return None

    def occupy(self, page_num: int) -> int:
        """Place page_num in the next free slot and return that slot"""
        if self.is_full():
            raise IndexError("No free slot in a full frame")
        if self.contains(page_num):
            raise ValueError(f"Page {page_num} is already resident")
        self.slots.append(page_num)
        return len(self.slots) - 1

    def replace(self, index: int, page_num: int) -> int:
        """Overwrite an occupied slot, return the page it held"""
        if not 0 <= index < len(self.slots):
            raise IndexError(f"Slot {index} is not occupied")
        evicted = self.slots[index]
        self.slots[index] = page_num
        return evicted

    def pages(self) -> List[int]:
        return list(self.slots)

    def clear(self):
        self.slots = []

    def __str__(self) -> str:
        empty = ["-"] * (self.capacity - len(self.slots))
        return f"Frame{[*self.slots, *empty]}"


class PageReplacementAlgorithm:
    """Base class for page replacement algorithms

    Filling a free slot is not counted as a fault unless count_cold_misses
    is set; only misses against a full frame are.
    """

    name = "BASE"

    def __init__(self, num_frames: int, count_cold_misses: bool = False):
        self.num_frames = num_frames
        self.count_cold_misses = count_cold_misses
        self.frame = WorkingSetFrame(num_frames)
        self.page_faults = 0

    def access_page(self, page_num: int) -> Tuple[bool, Optional[int]]:
        """
        Access a page, return (fault_occurred, evicted_page)
        """
        if self.frame.contains(page_num):
            self.on_hit(page_num)
            return False, None

        if not self.frame.is_full():
            self.frame.occupy(page_num)
            self.on_fill(page_num)
            if self.count_cold_misses:
                self.page_faults += 1
                return True, None
            return False, None

        # Page fault occurred
        self.page_faults += 1
        slot = self.choose_victim(page_num)
        evicted_page = self.frame.replace(slot, page_num)
        return True, evicted_page

    def choose_victim(self, page_num: int) -> int:
        """Return the slot to overwrite; called only when the frame is full"""
        raise NotImplementedError

    def on_hit(self, page_num: int):
        return

    def on_fill(self, page_num: int):
        return

    def simulate(self, reference_string: List[int]) -> int:
        """Run a complete reference string from an empty frame, return faults"""
        self.reset()
        for page_num in reference_string:
            self.access_page(page_num)
        return self.page_faults

    def reset(self):
        self.frame.clear()
        self.page_faults = 0


class LRUPolicy(PageReplacementAlgorithm):
    """Least Recently Used page replacement

    Recency is not tracked live. On each fault the reference history is
    scanned backward until every resident page has been seen once; the
    last one seen is the least recently used.
    """

    name = "LRU"

    def __init__(self, num_frames: int, count_cold_misses: bool = False):
        super().__init__(num_frames, count_cold_misses)
        self.history: List[int] = []

    def access_page(self, page_num: int) -> Tuple[bool, Optional[int]]:
        self.history.append(page_num)
        return super().access_page(page_num)

    def choose_victim(self, page_num: int) -> int:
        recently_used: List[int] = []
        victim = None
        for j in range(len(self.history) - 1, -1, -1):
            page = self.history[j]
            if not self.frame.contains(page) or page in recently_used:
                continue
            recently_used.append(page)
            if len(recently_used) == self.num_frames:
                victim = page
                break

        # Every resident page was referenced at least once, so the scan
        # always collects num_frames pages before reaching the start.
        if victim is None:
            raise RuntimeError("LRU history does not cover the resident pages")
        return self.frame.index_of(victim)

    def reset(self):
        super().reset()
        self.history.clear()


class FIFOPolicy(PageReplacementAlgorithm):
    """First-In-First-Out page replacement

    Free slots fill in order 0..n-1, so a cursor starting at slot 0 and
    advancing on each eviction always points at the oldest page.
    """

    name = "FIFO"

    def __init__(self, num_frames: int, count_cold_misses: bool = False):
        super().__init__(num_frames, count_cold_misses)
        self.fifo_index = 0

    def choose_victim(self, page_num: int) -> int:
        slot = self.fifo_index
        self.fifo_index = (self.fifo_index + 1) % self.num_frames
        return slot

    def reset(self):
        super().reset()
        self.fifo_index = 0


class ClockPolicy(PageReplacementAlgorithm):
    """Clock (second chance) page replacement"""

    name = "Clock"

    def __init__(self, num_frames: int, count_cold_misses: bool = False):
        super().__init__(num_frames, count_cold_misses)
        self.hand = 0
        self.use_bits = [0] * num_frames

    def on_hit(self, page_num: int):
        self.use_bits[self.frame.index_of(page_num)] = 1

    def choose_victim(self, page_num: int) -> int:
        # Used pages get one more revolution; at most one full sweep
        while self.use_bits[self.hand] != 0:
            self.use_bits[self.hand] = 0
            self.hand = (self.hand + 1) % self.num_frames

        # Incoming page keeps a clear bit
        slot = self.hand
        self.hand = (self.hand + 1) % self.num_frames
        return slot

    def reset(self):
        super().reset()
        self.hand = 0
        self.use_bits = [0] * self.num_frames


# Column order of the results table
POLICIES: Dict[str, type] = {
    "LRU": LRUPolicy,
    "FIFO": FIFOPolicy,
    "Clock": ClockPolicy,
}


def run_policy(name: str, wss: int, reference_string: List[int],
               count_cold_misses: bool = False) -> int:
    """Run the named policy with a frame of wss pages, return its fault count"""
    if name not in POLICIES:
        raise ValueError(f"Algorithm '{name}' not found")
    policy = POLICIES[name](wss, count_cold_misses=count_cold_misses)
    return policy.simulate(reference_string)
