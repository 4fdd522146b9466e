from __future__ import annotations

import math
import random

from ..geom import Transform

DRAWS_PER_INSTANCE = 6

POSITION_RANGE = (-0.5, 0.5)
YAW_RANGE = (-math.pi, math.pi)
SCALE_RANGE = (0.5, 1.5)

_SEED_MASK = (1 << 64) - 1


class RandomStream:
    """Seeded float stream owned by a single scatter.

    ``random.Random`` folds negative integer seeds onto their absolute value,
    so seeds are taken as unsigned 64-bit two's complement to keep ``s`` and
    ``-s`` apart.
    """

    def __init__(self, seed: int = 0):
        self._rng = random.Random()
        self.seed = 0
        self.set_seed(seed)

    def set_seed(self, seed: int) -> None:
        self.seed = int(seed)
        self._rng.seed(self.seed & _SEED_MASK)

    def next_float_in_range(self, lo: float, hi: float) -> float:
        return self._rng.uniform(float(lo), float(hi))


def sample_transform(stream: RandomStream, width: float, depth: float) -> Transform:
    # Draw order is part of the seed contract: x, y, yaw, then scale per axis.
    x = stream.next_float_in_range(*POSITION_RANGE) * float(width)
    y = stream.next_float_in_range(*POSITION_RANGE) * float(depth)

    yaw = stream.next_float_in_range(*YAW_RANGE)

    scale_lateral = stream.next_float_in_range(*SCALE_RANGE)
    scale_vertical = stream.next_float_in_range(*SCALE_RANGE)
    scale_depth = stream.next_float_in_range(*SCALE_RANGE)

    # Z-up: the vertical axis is Z and the depth axis is Y.
    return Transform(
        location=(x, y, 0.0),
        rotation=(0.0, 0.0, yaw),
        scale=(scale_lateral, scale_depth, scale_vertical),
    )
