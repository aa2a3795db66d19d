import argparse
import logging
import os
import sys

import numpy as np

from tmd_sim.config import load_config
from tmd_sim.errors import TMDSimError
from tmd_sim.models.building import ShearBuilding
from tmd_sim.models.rayleigh import modal_damping
from tmd_sim.report import dof_labels, modal_table, response_table
from tmd_sim.solve.frf import resonance_peaks


def main(cfg_path, out_dir):
    print(f"[run] cfg={cfg_path}")
    cfg = load_config(cfg_path)
    print(f"[cfg] n={cfg.n_floors}, m={cfg.floor_mass}, k={cfg.story_stiffness():.3e}, "
          f"zeta={cfg.zeta_target}, absorbers={cfg.absorber_mode.value}")

    bld = ShearBuilding(cfg)
    print(f"[dof] {bld.n_floors} floors + {len(bld.absorbers)} absorbers = {bld.n_dof}")
    print(f"[rayleigh] a0={bld.system.a0:.3e}, a1={bld.system.a1:.3e}")

    f, w, phi = bld.modal()
    z_eff = modal_damping(bld.C, bld.M, bld.K, phi, w)
    for i, fi in enumerate(f):
        print(f"[eig] mode {i+1}: f={fi:.3f} Hz, zeta_eff={z_eff[i]*100:.2f}%")

    omegas = cfg.omegas()
    X = bld.frequency_response(omegas)
    labels = dof_labels(bld.n_floors, bld.n_dof)[:X.shape[0]]
    pk_w, pk_x = resonance_peaks(omegas, X[0])
    for wp, xp in zip(pk_w, pk_x):
        print(f"[peak] floor 1: w={wp:.2f} rad/s ({wp/(2*np.pi):.3f} Hz), x={xp:.3e} m")

    os.makedirs(out_dir, exist_ok=True)
    modal_csv = os.path.join(out_dir, "modal_table.csv")
    frf_csv = os.path.join(out_dir, "frf.csv")
    modal_table(f, z_eff).to_csv(modal_csv, index=False)
    response_table(omegas, X, labels).to_csv(frf_csv, index=False)
    print(f"Saved: {modal_csv}, {frf_csv}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", default=os.path.join("configs", "base.yaml"))
    ap.add_argument("--out", default="data")
    args = ap.parse_args()
    try:
        main(args.config, args.out)
    except (TMDSimError, FileNotFoundError) as e:
        print("[fatal]", repr(e))
        sys.exit(1)
