import logging
import math
from dataclasses import dataclass

import numpy as np

from tmd_sim.errors import ConfigurationError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Absorber:
    mass: float         # kg
    stiffness: float    # N/m
    damping: float      # N s/m
    floor: int          # 1..n_floors

    def validate(self, n_floors, field="absorber"):
        if not self.mass > 0:
            raise ConfigurationError(f"{field}.mass", f"must be > 0, got {self.mass}")
        if not self.stiffness > 0:
            raise ConfigurationError(f"{field}.stiffness", f"must be > 0, got {self.stiffness}")
        if not self.damping >= 0:
            raise ConfigurationError(f"{field}.damping", f"must be >= 0, got {self.damping}")
        if not 1 <= self.floor <= n_floors:
            raise ConfigurationError(f"{field}.floor",
                                     f"must be in [1, {n_floors}], got {self.floor}")


def absorbers_from_arrays(masses, stiffnesses, dampings, floors):
    """Zip parallel per-absorber arrays into Absorber records."""
    lengths = {len(masses), len(stiffnesses), len(dampings), len(floors)}
    if len(lengths) != 1:
        raise ConfigurationError("absorbers",
                                 f"mismatched array lengths mass={len(masses)}, stiffness={len(stiffnesses)}, "
                                 f"damping={len(dampings)}, floor={len(floors)}")
    return [Absorber(float(m), float(k), float(c), int(fl))
            for m, k, c, fl in zip(masses, stiffnesses, dampings, floors)]


def _grow(A):
    n = A.shape[0]
    out = np.zeros((n+1, n+1), dtype=float)
    out[:n, :n] = A
    return out


def attach_absorber(M, K, C, absorber):
    """Return new (M, K, C) with one extra DOF coupled to absorber.floor.

    The inputs are left untouched.
    """
    M = _grow(np.asarray(M, dtype=float))
    K = _grow(np.asarray(K, dtype=float))
    C = _grow(np.asarray(C, dtype=float))
    a = M.shape[0] - 1          # new absorber DOF
    j = int(absorber.floor) - 1 # attachment floor DOF

    M[a, a] = absorber.mass
    for A, v in ((K, absorber.stiffness), (C, absorber.damping)):
        A[j, j] += v
        A[a, a] = v
        A[j, a] = -v
        A[a, j] = -v
    return M, K, C


def attach_absorbers(M, K, C, absorbers, n_floors=None):
    """Attach absorbers in list order; DOF n_floors+i belongs to absorbers[i]."""
    n_floors = int(n_floors if n_floors is not None else np.asarray(M).shape[0])
    for i, ab in enumerate(absorbers):
        ab.validate(n_floors, field=f"absorbers[{i}]")
    for ab in absorbers:
        M, K, C = attach_absorber(M, K, C, ab)
    log.debug("attached %d absorbers, n_dof=%d", len(absorbers), np.asarray(M).shape[0])
    return M, K, C


def random_absorbers(n, rng, n_floors, mass=0.05,
                     k_range=(100.0, 400.0), c_range=(0.0, 1.0)):
    """Draw n absorbers with uniform stiffness, damping and floor.

    rng is a numpy Generator (or an int seed) so runs are reproducible.
    """
    if not isinstance(rng, np.random.Generator):
        rng = np.random.default_rng(rng)
    n = int(n); n_floors = int(n_floors)
    ks = rng.uniform(float(k_range[0]), float(k_range[1]), size=n)
    cs = rng.uniform(float(c_range[0]), float(c_range[1]), size=n)
    floors = rng.integers(1, n_floors + 1, size=n)
    return [Absorber(float(mass), float(k), float(c), int(fl)) for k, c, fl in zip(ks, cs, floors)]


def den_hartog_absorber(modal_mass, w_target, mass_ratio, floor):
    """Absorber tuned to w_target (rad/s) with Den Hartog's optimum.

    f_opt = 1/(1+mu), zeta_opt = sqrt(3 mu / (8 (1+mu)^3)).
    """
    mu = float(mass_ratio)
    if not mu > 0:
        raise ConfigurationError("mass_ratio", f"must be > 0, got {mass_ratio}")
    m_a = mu * float(modal_mass)
    w_a = float(w_target) / (1.0 + mu)
    zeta = math.sqrt(3.0*mu / (8.0*(1.0 + mu)**3))
    return Absorber(m_a, m_a * w_a**2, 2.0 * zeta * m_a * w_a, int(floor))
