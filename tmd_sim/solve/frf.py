"""Steady-state harmonic response, B(w) x = F with B(w) = -w^2 M + i w C + K.

Singular policy: a dynamic stiffness matrix whose condition number exceeds
1/eps (undamped system driven exactly at a natural frequency, or w = 0 with
a singular K) is singular. With on_singular="raise" the sweep stops with a
NumericalError carrying that w; with on_singular="skip" the column is set to
NaN, a warning is logged and the sweep continues. Lightly damped systems at
resonance are not singular and return large finite amplitudes.
"""
import logging

import numpy as np
from scipy.linalg import LinAlgError, solve
from scipy.signal import find_peaks

from tmd_sim.errors import ConfigurationError, InputRangeError, NumericalError

log = logging.getLogger(__name__)

DISPLACEMENT_MODES = ("magnitude", "signed")
SINGULAR_POLICIES = ("raise", "skip")


def unit_force(n_dof):
    F = np.zeros(int(n_dof), dtype=float)
    F[0] = 1.0
    return F


def dynamic_stiffness(M, C, K, w):
    w = float(w)
    return -w**2 * np.asarray(M, dtype=float) + 1j*w*np.asarray(C, dtype=float) + np.asarray(K, dtype=float)


def solve_harmonic(M, C, K, F, w):
    """Complex displacement amplitude at one excitation frequency w (rad/s)."""
    B = dynamic_stiffness(M, C, K, w)
    if not np.linalg.cond(B) < 1.0/np.finfo(float).eps:
        raise NumericalError(f"dynamic stiffness is singular at w={w:.6g} rad/s", omega=w)
    try:
        return solve(B, np.asarray(F, dtype=complex))
    except LinAlgError as e:
        raise NumericalError(f"dynamic stiffness is singular at w={w:.6g} rad/s ({e})", omega=w)


def frequency_response(M, C, K, F, omegas, displacement="magnitude",
                       n_floors=None, on_singular="raise"):
    """Displacement amplitudes indexed [dof, frequency].

    displacement: "magnitude" -> |Re x|, "signed" -> Re x.
    n_floors: keep only the first n_floors rows (hide absorber DOFs).
    """
    if displacement not in DISPLACEMENT_MODES:
        raise ConfigurationError("displacement_mode", f"expected one of {DISPLACEMENT_MODES}, got {displacement!r}")
    if on_singular not in SINGULAR_POLICIES:
        raise ConfigurationError("on_singular", f"expected one of {SINGULAR_POLICIES}, got {on_singular!r}")
    omegas = np.atleast_1d(np.asarray(omegas, dtype=float))
    if omegas.size == 0:
        raise InputRangeError("frequency sweep is empty")

    n_dof = np.asarray(M).shape[0]
    X = np.empty((n_dof, omegas.size), dtype=float)
    skipped = 0
    for j, w in enumerate(omegas):
        try:
            x = solve_harmonic(M, C, K, F, w)
        except NumericalError as e:
            if on_singular == "raise":
                raise
            log.warning("skipping sweep point: %s", e)
            X[:, j] = np.nan
            skipped += 1
            continue
        X[:, j] = np.abs(x.real) if displacement == "magnitude" else x.real

    if skipped:
        log.info("frequency sweep: %d of %d points skipped", skipped, omegas.size)
    if n_floors is not None:
        X = X[:int(n_floors), :]
    return X


def resonance_peaks(omegas, trace, prominence=None):
    """Local maxima of one response trace -> (peak omegas, peak amplitudes)."""
    omegas = np.asarray(omegas, dtype=float)
    amp = np.abs(np.nan_to_num(np.asarray(trace, dtype=float)))
    idx, _ = find_peaks(amp, prominence=prominence)
    return omegas[idx], amp[idx]
