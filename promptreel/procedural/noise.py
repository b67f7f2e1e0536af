"""
Coherent 3D simplex noise, seeded from our PRNG so each prompt gets its own reproducible field.
Vectorized with numpy: x, y, z may be scalars or arrays (broadcast together).
"""
from __future__ import annotations

from typing import Callable

import numpy as np

from ..random_utils import hash_prompt, mulberry32

F3 = 1.0 / 3.0
G3 = 1.0 / 6.0

# Combined with the prompt hash to seed the noise permutation
NOISE_SEED_MIX = 0xA53B1

# 12 edge-midpoint gradients of a cube
_GRAD3 = np.array(
    [
        [1, 1, 0], [-1, 1, 0], [1, -1, 0], [-1, -1, 0],
        [1, 0, 1], [-1, 0, 1], [1, 0, -1], [-1, 0, -1],
        [0, 1, 1], [0, -1, 1], [0, 1, -1], [0, -1, -1],
    ],
    dtype=np.float64,
)


def build_permutation_table(random: Callable[[], float]) -> np.ndarray:
    """Shuffle 0..255 with the given random source and repeat it to 512 entries."""
    p = list(range(256))
    for i in range(255):
        r = i + int(random() * (256 - i))
        p[i], p[r] = p[r], p[i]
    return np.array(p + p, dtype=np.int64)


class SimplexNoise3D:
    """
    Smooth noise in roughly [-1, 1]. Small input deltas give small output deltas.
    Holds only its permutation table; calling it never mutates anything.
    """

    def __init__(self, random: Callable[[], float]):
        self.perm = build_permutation_table(random)
        grads = _GRAD3[self.perm % 12]
        self._gx = grads[:, 0]
        self._gy = grads[:, 1]
        self._gz = grads[:, 2]

    def _corner(self, gi, x, y, z):
        t = 0.6 - x * x - y * y - z * z
        t2 = t * t
        contrib = t2 * t2 * (self._gx[gi] * x + self._gy[gi] * y + self._gz[gi] * z)
        return np.where(t < 0, 0.0, contrib)

    def __call__(self, x, y, z):
        scalar = np.ndim(x) == 0 and np.ndim(y) == 0 and np.ndim(z) == 0
        x, y, z = np.broadcast_arrays(
            np.asarray(x, dtype=np.float64),
            np.asarray(y, dtype=np.float64),
            np.asarray(z, dtype=np.float64),
        )

        # Skew into simplex cell space
        s = (x + y + z) * F3
        i = np.floor(x + s).astype(np.int64)
        j = np.floor(y + s).astype(np.int64)
        k = np.floor(z + s).astype(np.int64)
        t = (i + j + k) * G3
        x0 = x - (i - t)
        y0 = y - (j - t)
        z0 = z - (k - t)

        # Which of the six tetrahedra we're in
        xy = x0 >= y0
        yz = y0 >= z0
        xz = x0 >= z0
        i1 = (xy & (yz | xz)).astype(np.int64)
        j1 = (~xy & yz).astype(np.int64)
        k1 = ((xy & ~yz & ~xz) | (~xy & ~yz)).astype(np.int64)
        i2 = (xy | (yz & xz)).astype(np.int64)
        j2 = ((xy & yz) | ~xy).astype(np.int64)
        k2 = ((xy & ~yz) | (~xy & ~(yz & xz))).astype(np.int64)

        x1 = x0 - i1 + G3
        y1 = y0 - j1 + G3
        z1 = z0 - k1 + G3
        x2 = x0 - i2 + 2.0 * G3
        y2 = y0 - j2 + 2.0 * G3
        z2 = z0 - k2 + 2.0 * G3
        x3 = x0 - 1.0 + 3.0 * G3
        y3 = y0 - 1.0 + 3.0 * G3
        z3 = z0 - 1.0 + 3.0 * G3

        ii = i & 255
        jj = j & 255
        kk = k & 255
        perm = self.perm
        gi0 = ii + perm[jj + perm[kk]]
        gi1 = ii + i1 + perm[jj + j1 + perm[kk + k1]]
        gi2 = ii + i2 + perm[jj + j2 + perm[kk + k2]]
        gi3 = ii + 1 + perm[jj + 1 + perm[kk + 1]]

        n = (
            self._corner(gi0, x0, y0, z0)
            + self._corner(gi1, x1, y1, z1)
            + self._corner(gi2, x2, y2, z2)
            + self._corner(gi3, x3, y3, z3)
        )
        out = 32.0 * n
        return float(out) if scalar else out


def make_noise_field(prompt: str) -> SimplexNoise3D:
    """Noise field for one generation run. Hashes the prompt as submitted (case preserved)."""
    return SimplexNoise3D(mulberry32(hash_prompt(prompt) | NOISE_SEED_MIX))
