import numpy as np
import pandas as pd


def dof_labels(n_floors, n_dof):
    return [f"floor_{i+1}" for i in range(n_floors)] + \
           [f"absorber_{i+1}" for i in range(n_dof - n_floors)]


def modal_table(f, zeta_eff=None):
    df = pd.DataFrame({"mode": np.arange(1, len(f)+1), "f_Hz": f})
    if zeta_eff is not None:
        df["zeta_eff"] = zeta_eff
    return df


def response_table(omegas, X, labels):
    """One row per swept frequency, one column per DOF trace."""
    omegas = np.asarray(omegas, dtype=float)
    df = pd.DataFrame({"w_rad_s": omegas, "f_Hz": omegas / (2*np.pi)})
    for lab, row in zip(labels, np.asarray(X)):
        df[lab] = row
    return df
