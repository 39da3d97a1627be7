#!/usr/bin/env python3
"""
Reference Trace Generation
Synthetic page-reference traces drawn from a mixture of normal distributions
"""

import math
import random
from typing import List, Optional

REGIONS = 10        # hot spots per trace
REGION_STRIDE = 10  # page-number distance between region centers


class NormalSampler:
    """Integer normal variates via the Box-Muller transform

    rng is any object with a random() method returning floats in [0, 1).
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    def sample(self, mean: float, sd: float) -> int:
        # log(0) is undefined, so the first variate is redrawn until nonzero
        u1 = self.rng.random()
        while u1 == 0.0:
            u1 = self.rng.random()
        u2 = self.rng.random()

        z = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
        return int(z * sd + mean)


class ReferenceTraceGenerator:
    """Builds one trace per trial, split into REGIONS contiguous regions"""

    def __init__(self, mean: float = 10, sd: float = 2,
                 rng: Optional[random.Random] = None):
        self.mean = mean
        self.sd = sd
        self.sampler = NormalSampler(rng)

    def generate(self, length: int) -> List[int]:
        """
        Generate a reference string of the given length.
        Reference j lies around REGION_STRIDE * (j // region_width) + mean.
        """
        region_width = max(length // REGIONS, 1)
        return [
            REGION_STRIDE * (j // region_width) + self.sampler.sample(self.mean, self.sd)
            for j in range(length)
        ]
