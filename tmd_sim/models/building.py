import logging
from collections import namedtuple

import numpy as np

from tmd_sim.config import AbsorberMode
from tmd_sim.models.absorbers import attach_absorbers, random_absorbers
from tmd_sim.models.mdof import modal_analysis, shear_building
from tmd_sim.models.rayleigh import C_rayleigh, rayleigh_lstsq
from tmd_sim.solve.frf import frequency_response, unit_force

log = logging.getLogger(__name__)

SystemMatrices = namedtuple("SystemMatrices", "M K C F n_floors absorbers a0 a1")


def select_absorbers(cfg, rng=None):
    """Absorber list in DOF order: random draws first, then the curated list."""
    if cfg.absorber_mode is AbsorberMode.NONE:
        return []
    if cfg.absorber_mode is AbsorberMode.CURATED:
        return list(cfg.absorbers)
    ra = cfg.random_absorbers
    rng = rng if rng is not None else np.random.default_rng(cfg.seed)
    drawn = random_absorbers(ra.count, rng, cfg.n_floors, mass=ra.mass,
                             k_range=ra.stiffness, c_range=ra.damping)
    return drawn + list(cfg.absorbers)


def build_system(cfg, rng=None):
    """Assemble the full M, K, C and force vector for one configuration."""
    cfg.validate()
    M0, K0 = shear_building(cfg.n_floors, cfg.floor_mass, cfg.story_stiffness())
    a0, a1 = rayleigh_lstsq(M0, K0, cfg.zeta_target)
    C0 = C_rayleigh(M0, K0, a0, a1)

    absorbers = select_absorbers(cfg, rng)
    M, K, C = attach_absorbers(M0, K0, C0, absorbers, cfg.n_floors)
    for A in (M, K, C):
        A.setflags(write=False)
    log.info("assembled %d floors + %d absorbers (n_dof=%d), Rayleigh a0=%.3e a1=%.3e",
             cfg.n_floors, len(absorbers), M.shape[0], a0, a1)
    return SystemMatrices(M, K, C, unit_force(M.shape[0]), cfg.n_floors, tuple(absorbers), a0, a1)


class ShearBuilding:
    """Shear building plus absorbers, assembled once from a SimConfig."""

    def __init__(self, cfg, rng=None):
        self.cfg = cfg
        self.system = build_system(cfg, rng)
        self._modal = None

    M = property(lambda self: self.system.M)
    K = property(lambda self: self.system.K)
    C = property(lambda self: self.system.C)
    F = property(lambda self: self.system.F)
    n_floors = property(lambda self: self.system.n_floors)
    absorbers = property(lambda self: self.system.absorbers)

    @property
    def n_dof(self):
        return self.system.M.shape[0]

    def modal(self):
        if self._modal is None:
            self._modal = modal_analysis(self.M, self.K)
        return self._modal

    def natural_frequencies(self):
        return self.modal()[0].copy()

    def mode_shapes(self):
        phi = self.modal()[2]
        return [phi[:, i].copy() for i in range(phi.shape[1])]

    def frequency_response(self, omegas=None):
        """Displacement [dof, frequency] for omegas in rad/s (config sweep by default)."""
        omegas = self.cfg.omegas() if omegas is None else omegas
        return frequency_response(
            self.M, self.C, self.K, self.F, omegas,
            displacement=self.cfg.displacement_mode.value,
            n_floors=None if self.cfg.show_absorber_displacement else self.n_floors,
            on_singular=self.cfg.on_singular,
        )
