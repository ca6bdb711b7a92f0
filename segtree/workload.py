import os
from time import perf_counter

import numpy as np
from torch.utils.tensorboard import SummaryWriter

from .monoid import make_monoid, check_laws
from .segment_tree import SegmentTree
from .utils import RunningMeanStats


def _sample_int(low, high):
    def sample(rng):
        return int(rng.randint(low, high))
    return sample


def _sample_letter(rng):
    return chr(ord('a') + rng.randint(26))


# Values are kept small enough that every stock monoid stays exact.
SAMPLERS = {
    'sum': _sample_int(-100, 100),
    'product': lambda rng: int(rng.choice([-1, 1, 2])),
    'min': _sample_int(-1000, 1000),
    'max': _sample_int(-1000, 1000),
    'concat': _sample_letter,
    'bit_or': _sample_int(0, 1 << 16),
    'bit_and': _sample_int(0, 1 << 16),
}

OPERATIONS = ('set', 'combine_at', 'query')


class WorkloadRunner:
    """Replays random operations on a tree and on a plain list.

    Every query result is compared with a linear fold over the list, and
    every `eval_interval` steps the whole tree is checked.
    """

    def __init__(self, monoid, log_dir, size=1000, num_steps=10000,
                 set_ratio=0.3, combine_ratio=0.2, monoid_kwargs=None,
                 num_law_samples=6, log_interval=100, eval_interval=1000,
                 seed=0):
        assert size > 0
        assert 0 <= set_ratio and 0 <= combine_ratio
        assert set_ratio + combine_ratio <= 1.0

        monoid_kwargs = monoid_kwargs or {}
        self.monoid = make_monoid(monoid, **monoid_kwargs)
        self.rng = np.random.RandomState(seed)
        if monoid == 'vector_sum':
            shape = self.monoid.shape
            self.sample = lambda rng: rng.randint(-10, 10, size=shape)
        else:
            self.sample = SAMPLERS[monoid]

        initial = [self.sample(self.rng) for _ in range(size)]
        self.reference = [self.monoid.convert(v) for v in initial]
        self.tree = SegmentTree.from_sequence(initial, self.monoid)

        self.log_dir = log_dir
        self.summary_dir = os.path.join(log_dir, 'summary')
        if not os.path.exists(self.summary_dir):
            os.makedirs(self.summary_dir)

        self.writer = SummaryWriter(log_dir=self.summary_dir)
        self.op_times = {
            op: RunningMeanStats(log_interval) for op in OPERATIONS}

        self.steps = 0
        self.mismatches = 0
        self.num_steps = num_steps
        self.size = size
        probs = np.array([
            set_ratio, combine_ratio,
            max(0.0, 1.0 - set_ratio - combine_ratio)])
        self.probs = probs / probs.sum()
        self.num_law_samples = num_law_samples
        self.log_interval = log_interval
        self.eval_interval = eval_interval

    def run(self):
        try:
            while self.steps < self.num_steps:
                self.step()
                if self.steps % self.eval_interval == 0:
                    self.evaluate()
        finally:
            self.writer.close()
        return self.mismatches

    def step(self):
        self.steps += 1
        op = OPERATIONS[self.rng.choice(len(OPERATIONS), p=self.probs)]

        if op == 'query':
            start, end = sorted(self.rng.randint(0, self.size + 1, size=2))
            start, end = int(start), int(end)
            t = perf_counter()
            result = self.tree.query(start, end)
            self.op_times[op].append(perf_counter() - t)

            expected = self.monoid.mconcat(self.reference[start:end])
            if not self.monoid.equal(result, expected):
                self.mismatches += 1
                print(f'mismatch: query({start}, {end}) = {result!r}, '
                      f'expected {expected!r}')
        else:
            idx = int(self.rng.randint(self.size))
            value = self.sample(self.rng)
            t = perf_counter()
            getattr(self.tree, op)(idx, value)
            self.op_times[op].append(perf_counter() - t)

            value = self.monoid.convert(value)
            if op == 'set':
                self.reference[idx] = value
            else:
                self.reference[idx] = self.monoid.mappend(
                    self.reference[idx], value)

        if self.steps % self.log_interval == 0:
            for name, stats in self.op_times.items():
                if len(stats):
                    self.writer.add_scalar(
                        f'time/{name}', stats.get(), self.steps)

    def evaluate(self):
        errors = 0
        for i, expected in enumerate(self.reference):
            if not self.monoid.equal(self.tree.get(i), expected):
                errors += 1

        if not self.monoid.equal(
                self.tree.query(), self.monoid.mconcat(self.reference)):
            errors += 1

        samples = [self.sample(self.rng) for _ in range(self.num_law_samples)]
        samples = [self.monoid.convert(v) for v in samples]
        lawful = check_laws(self.monoid, samples)
        if not lawful:
            errors += 1

        self.mismatches += errors
        self.writer.add_scalar('check/mismatches', self.mismatches, self.steps)
        self.writer.add_scalar('check/lawful', float(lawful), self.steps)

        print('-' * 60)
        print(f'Num steps: {self.steps:<6}  '
              f'errors: {errors:<4}  '
              f'lawful: {str(lawful):<5}  '
              f'query: {self.op_times["query"].get() * 1e6:<6.1f} us')
        print('-' * 60)
