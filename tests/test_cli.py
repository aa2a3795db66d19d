"""Tests for the batch frequency-response driver."""
from pathlib import Path

import pandas as pd
import pytest

from tmd_sim.cli.run_frf import main
from tmd_sim.errors import ConfigurationError

BASE_YAML = Path(__file__).parent.parent / "configs" / "base.yaml"


def test_run_base_config(tmp_path, capsys):
    main(str(BASE_YAML), str(tmp_path))
    modal = pd.read_csv(tmp_path / "modal_table.csv")
    frf = pd.read_csv(tmp_path / "frf.csv")

    assert list(modal.columns) == ["mode", "f_Hz", "zeta_eff"]
    assert len(modal) == 5
    assert modal["f_Hz"].is_monotonic_increasing
    assert list(frf.columns) == ["w_rad_s", "f_Hz", "floor_1", "floor_2", "floor_3"]
    assert len(frf) == 1000

    out = capsys.readouterr().out
    assert "[dof] 3 floors + 2 absorbers = 5" in out
    assert "Saved:" in out


def test_run_bad_config(tmp_path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("n_floors: 3\nabsorber_mode: curated\nabsorbers:\n  - {mass: 0.05, stiffness: 250, floor: 7}\n")
    with pytest.raises(ConfigurationError, match="floor"):
        main(str(cfg), str(tmp_path / "out"))
