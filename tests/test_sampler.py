import math
import random
import unittest

from mesh_scatter.scatter.sampler import (
    DRAWS_PER_INSTANCE,
    POSITION_RANGE,
    SCALE_RANGE,
    YAW_RANGE,
    RandomStream,
    sample_transform,
)


class RecordingStream(RandomStream):
    def __init__(self, seed=0):
        self.calls = []
        super().__init__(seed)

    def next_float_in_range(self, lo, hi):
        self.calls.append((lo, hi))
        return super().next_float_in_range(lo, hi)


class TestRandomStream(unittest.TestCase):
    def test_set_seed_rewinds(self):
        stream = RandomStream(7)
        first = [stream.next_float_in_range(0.0, 1.0) for _ in range(5)]
        stream.set_seed(7)
        second = [stream.next_float_in_range(0.0, 1.0) for _ in range(5)]
        self.assertEqual(first, second)

    def test_matches_mersenne_twister_reference(self):
        stream = RandomStream(42)
        ref = random.Random(42)
        for lo, hi in ((-0.5, 0.5), (-math.pi, math.pi), (0.5, 1.5)):
            self.assertEqual(stream.next_float_in_range(lo, hi), ref.uniform(lo, hi))

    def test_negative_seed_differs_from_positive(self):
        a = RandomStream(1)
        b = RandomStream(-1)
        self.assertNotEqual(a.next_float_in_range(0.0, 1.0), b.next_float_in_range(0.0, 1.0))
        self.assertEqual(b.seed, -1)


class TestSampleTransform(unittest.TestCase):
    def test_six_draws_in_fixed_order(self):
        stream = RecordingStream(3)
        sample_transform(stream, 4.0, 2.0)
        self.assertEqual(DRAWS_PER_INSTANCE, 6)
        self.assertEqual(
            stream.calls,
            [POSITION_RANGE, POSITION_RANGE, YAW_RANGE, SCALE_RANGE, SCALE_RANGE, SCALE_RANGE],
        )

    def test_values_follow_draw_sequence(self):
        stream = RandomStream(11)
        t = sample_transform(stream, 10.0, 4.0)

        ref = random.Random(11)
        x = ref.uniform(-0.5, 0.5) * 10.0
        y = ref.uniform(-0.5, 0.5) * 4.0
        yaw = ref.uniform(-math.pi, math.pi)
        lateral = ref.uniform(0.5, 1.5)
        vertical = ref.uniform(0.5, 1.5)
        depth = ref.uniform(0.5, 1.5)

        self.assertEqual(t.location, (x, y, 0.0))
        self.assertEqual(t.rotation, (0.0, 0.0, yaw))
        # Z-up: vertical scale lands on Z, depth scale on Y.
        self.assertEqual(t.scale, (lateral, depth, vertical))

    def test_containment(self):
        stream = RandomStream(2024)
        width, depth = 3.0, 7.0
        for _ in range(500):
            t = sample_transform(stream, width, depth)
            x, y, z = t.location
            self.assertLessEqual(abs(x), width / 2)
            self.assertLessEqual(abs(y), depth / 2)
            self.assertEqual(z, 0.0)

            rx, ry, rz = t.rotation
            self.assertEqual((rx, ry), (0.0, 0.0))
            self.assertGreaterEqual(rz, -math.pi)
            self.assertLessEqual(rz, math.pi)

            for s in t.scale:
                self.assertGreaterEqual(s, 0.5)
                self.assertLessEqual(s, 1.5)

    def test_scale_axes_are_independent(self):
        stream = RandomStream(5)
        uneven = 0
        for _ in range(20):
            sx, sy, sz = sample_transform(stream, 1.0, 1.0).scale
            if not (sx == sy == sz):
                uneven += 1
        self.assertGreater(uneven, 0)

    def test_zero_area_collapses_to_origin(self):
        for seed in (0, 1, 99, -12):
            stream = RandomStream(seed)
            for _ in range(10):
                self.assertEqual(sample_transform(stream, 0.0, 0.0).location, (0.0, 0.0, 0.0))


if __name__ == "__main__":
    unittest.main()
