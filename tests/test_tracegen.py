"""Tests for the Box-Muller sampler and the reference trace generator."""

import random
from itertools import cycle

from tracegen import REGIONS, NormalSampler, ReferenceTraceGenerator


class FixedRandom:
    """Replays a fixed sequence of uniform variates."""

    def __init__(self, values, repeat=False):
        self.values = cycle(values) if repeat else iter(values)
        self.draws = 0

    def random(self):
        self.draws += 1
        return next(self.values)


class TestNormalSampler:
    def test_fixed_variates(self):
        # sqrt(-2 ln 0.5) * cos(0) * 2 + 10 = 12.35...
        sampler = NormalSampler(FixedRandom([0.5, 0.0]))
        assert sampler.sample(10, 2) == 12

    def test_zero_first_variate_is_redrawn(self):
        rng = FixedRandom([0.0, 0.0, 0.5, 0.5])
        # sqrt(-2 ln 0.5) * cos(pi) * 2 + 10 = 7.64...
        assert NormalSampler(rng).sample(10, 2) == 7
        assert rng.draws == 4

    def test_truncates_toward_zero(self):
        # -2.35... truncates to -2, not -3
        sampler = NormalSampler(FixedRandom([0.5, 0.5]))
        assert sampler.sample(0, 2) == -2

    def test_two_draws_per_sample(self):
        rng = FixedRandom([0.3, 0.7, 0.9, 0.1])
        sampler = NormalSampler(rng)
        sampler.sample(10, 2)
        sampler.sample(10, 2)
        assert rng.draws == 4

    def test_zero_sd_returns_mean(self):
        sampler = NormalSampler(random.Random(5))
        assert {sampler.sample(10, 0) for _ in range(20)} == {10}

    def test_sample_mean_close_to_requested(self):
        sampler = NormalSampler(random.Random(11))
        samples = [sampler.sample(10, 2) for _ in range(5000)]
        # truncation biases the mean slightly downward
        assert 9.3 < sum(samples) / len(samples) < 10.2


class TestReferenceTraceGenerator:
    def test_length(self):
        generator = ReferenceTraceGenerator(rng=random.Random(3))
        assert len(generator.generate(1000)) == 1000

    def test_region_offsets_with_fixed_variates(self):
        generator = ReferenceTraceGenerator(10, 2, FixedRandom([0.5, 0.0], repeat=True))
        trace = generator.generate(20)
        # two references per region, each 12 above its region base
        assert trace == [10 * (j // 2) + 12 for j in range(20)]

    def test_regions_form_hot_spots(self):
        generator = ReferenceTraceGenerator(rng=random.Random(8))
        trace = generator.generate(1000)
        width = len(trace) // REGIONS
        for r in range(REGIONS):
            region = trace[r * width:(r + 1) * width]
            centre = sum(region) / len(region)
            assert abs(centre - (10 * r + 10)) < 1.5

    def test_short_trace(self):
        generator = ReferenceTraceGenerator(10, 0, random.Random(1))
        assert generator.generate(4) == [10, 20, 30, 40]

    def test_same_seed_same_trace(self):
        first = ReferenceTraceGenerator(rng=random.Random(42)).generate(200)
        second = ReferenceTraceGenerator(rng=random.Random(42)).generate(200)
        assert first == second
