import logging

import numpy as np
from scipy.linalg import lstsq

from tmd_sim.errors import ConfigurationError, NumericalError
from tmd_sim.models.mdof import modal_analysis

log = logging.getLogger(__name__)


def rayleigh_lstsq(M, K, zeta=0.0):
    """Fit zeta_i = a0/(2 w_i) + a1 w_i/2 over every mode of (K, M).

    zeta is a scalar applied to all modes or one target per mode. With more
    than two modes the system is overdetermined and solved by least squares.
    """
    _, w, _ = modal_analysis(M, K)
    zeta = np.asarray(zeta, dtype=float)
    if zeta.ndim == 0:
        zeta = np.full(len(w), float(zeta))
    if zeta.shape != w.shape:
        raise ConfigurationError("zeta_target", f"{zeta.size} entries for {w.size} modes")
    if not np.any(zeta):
        return 0.0, 0.0
    if np.any(w <= 0):
        raise NumericalError("Rayleigh fit needs strictly positive natural frequencies")

    A = np.column_stack([1.0/(2.0*w), w/2.0])
    (a0, a1), *_ = lstsq(A, zeta)
    log.debug("Rayleigh least squares over %d modes: a0=%.4e, a1=%.4e", len(w), a0, a1)
    return float(a0), float(a1)

def C_rayleigh(M, K, a0, a1):
    return a0*np.asarray(M, dtype=float) + a1*np.asarray(K, dtype=float)

def modal_damping(C, M, K, phi, w):
    zetas = []
    for i in range(len(w)):
        v = phi[:, i]
        num = float(v @ C @ v)
        den = 2.0 * w[i] * float(v @ M @ v)
        zetas.append(num/den if den > 0 else np.nan)
    return np.array(zetas)
