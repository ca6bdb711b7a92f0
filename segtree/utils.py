from collections import deque
import numpy as np


def next_power_of_two(n):
    capacity = 1
    while capacity < n:
        capacity *= 2
    return capacity


class RunningMeanStats:

    def __init__(self, n=10):
        self.n = n
        self.stats = deque(maxlen=n)

    def append(self, x):
        self.stats.append(x)

    def get(self):
        if not self.stats:
            return 0.0
        return float(np.mean(self.stats))

    def __len__(self):
        return len(self.stats)
