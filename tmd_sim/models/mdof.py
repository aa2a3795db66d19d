import logging

import numpy as np
from scipy.linalg import LinAlgError, eigh

from tmd_sim.errors import InputRangeError, NumericalError

log = logging.getLogger(__name__)


def floor_stiffness(length, thickness, width, E, n_columns=2):
    """Lateral stiffness of one story carried by fixed-fixed leaf columns.

    Each column bends about its thin axis, I = width * thickness**3 / 12,
    and contributes 12*E*I/L**3.
    """
    L = float(length); t = float(thickness); b = float(width); E = float(E)
    I = b * t**3 / 12.0
    return int(n_columns) * 12.0 * E * I / L**3


def _per_floor(value, n, name):
    arr = np.asarray(value, dtype=float)
    if arr.ndim == 0:
        arr = np.full(n, float(arr))
    if arr.shape != (n,):
        raise InputRangeError(f"{name} has {arr.size} entries, expected {n}")
    return arr.copy()


def shear_building(n=3, m=1.0, k=1.0e3):
    """Fixed-base, free-top shear chain.

    m, k may be scalars or per-floor sequences; k[i] is the story spring
    below floor i+1.
    """
    n = int(n)
    if n < 1:
        raise InputRangeError(f"n_floors must be >= 1, got {n}")
    m = _per_floor(m, n, "floor mass")
    k = _per_floor(k, n, "story stiffness")

    M = np.diag(m)
    K = np.zeros((n, n), dtype=float)
    for i in range(n):
        K[i, i] = k[i] + (k[i+1] if i < n-1 else 0.0)
        if i < n-1:
            K[i, i+1] = -k[i+1]
            K[i+1, i] = -k[i+1]
    return M, K


def modal_analysis(M, K, tol=1e-9):
    """Natural frequencies (Hz, rad/s) and mode shapes sorted ascending.

    Mode shapes are the columns of phi, M-orthonormal as returned by eigh.
    """
    M = np.asarray(M, dtype=float); K = np.asarray(K, dtype=float)
    # eigh reads one triangle only, an asymmetric pair would hide complex eigenvalues
    for name, A in (("M", M), ("K", K)):
        scale = max(float(np.max(np.abs(A))), 1.0) if A.size else 1.0
        if A.ndim != 2 or A.shape[0] != A.shape[1] or not np.allclose(A, A.T, rtol=tol, atol=tol*scale):
            raise NumericalError(f"{name} must be square and symmetric")
    try:
        w2, phi = eigh(K, M)
    except LinAlgError as e:
        raise NumericalError(f"generalized eigenproblem failed, M must be positive definite ({e})")

    if not np.all(np.isfinite(w2)):
        raise NumericalError("eigenvalues are not finite")
    floor = tol * max(float(np.max(np.abs(w2))), 1.0)
    if np.any(w2 < -floor):
        raise NumericalError(f"negative eigenvalue {float(w2.min()):.3e}, K is not positive semi-definite")

    order = np.argsort(w2, kind="stable")
    w2 = w2[order]; phi = phi[:, order]
    w = np.sqrt(np.clip(w2, 0, None))
    f = w / (2*np.pi)
    log.debug("modal analysis: %d modes, f1=%.4f Hz", len(f), f[0])
    return f, w, phi
