"""YAML configuration for a shear building with tuned mass dampers.

Schema (all keys optional except n_floors)::

    n_floors: 3
    floor_mass: 1.83          # kg per floor
    k_story: null             # N/m, overrides the geometry below when set
    floor_length: 0.2         # m, column length
    floor_thickness: 0.001    # m
    floor_width: 0.08         # m
    youngs_modulus: 2.1e11    # Pa
    zeta_target: 0.0          # Rayleigh target damping ratio of the floors
    absorber_mode: curated    # none | curated | random
    absorbers:                # list of records ...
      - {mass: 0.05, stiffness: 250, damping: 0.0, floor: 2}
    # ... or parallel arrays
    # absorbers: {mass: [..], stiffness: [..], damping: [..], floor: [..]}
    random_absorbers: {count: 2, mass: 0.05, stiffness: [100, 400], damping: [0, 1]}
    seed: 42
    displacement_mode: magnitude   # magnitude | signed
    show_absorber_displacement: false
    on_singular: raise             # raise | skip
    sweep: {w_min: 1.0, w_max: 130.0, n_points: 1000}   # rad/s
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import numpy as np
import yaml

from tmd_sim.errors import ConfigurationError, InputRangeError
from tmd_sim.models.absorbers import Absorber, absorbers_from_arrays
from tmd_sim.models.mdof import floor_stiffness


class AbsorberMode(str, Enum):
    NONE = "none"
    CURATED = "curated"
    RANDOM = "random"


class DisplacementMode(str, Enum):
    MAGNITUDE = "magnitude"
    SIGNED = "signed"


@dataclass
class RandomAbsorbers:
    count: int = 0
    mass: float = 0.05
    stiffness: tuple = (100.0, 400.0)
    damping: tuple = (0.0, 1.0)


@dataclass
class Sweep:
    w_min: float = 1.0
    w_max: float = 130.0
    n_points: int = 1000


@dataclass
class SimConfig:
    n_floors: int = 3
    floor_mass: float = 1.83
    k_story: float = None
    floor_length: float = 0.2
    floor_thickness: float = 0.001
    floor_width: float = 0.08
    youngs_modulus: float = 2.1e11
    zeta_target: float = 0.0
    absorber_mode: AbsorberMode = AbsorberMode.NONE
    absorbers: list = field(default_factory=list)
    random_absorbers: RandomAbsorbers = field(default_factory=RandomAbsorbers)
    seed: int = None
    displacement_mode: DisplacementMode = DisplacementMode.MAGNITUDE
    show_absorber_displacement: bool = False
    on_singular: str = "raise"
    sweep: Sweep = field(default_factory=Sweep)

    def story_stiffness(self):
        if self.k_story is not None:
            return float(self.k_story)
        return floor_stiffness(self.floor_length, self.floor_thickness,
                               self.floor_width, self.youngs_modulus)

    def omegas(self):
        return np.linspace(self.sweep.w_min, self.sweep.w_max, self.sweep.n_points)

    def validate(self):
        self.absorber_mode = _enum({"absorber_mode": self.absorber_mode},
                                   "absorber_mode", AbsorberMode, AbsorberMode.NONE)
        self.displacement_mode = _enum({"displacement_mode": self.displacement_mode},
                                       "displacement_mode", DisplacementMode, DisplacementMode.MAGNITUDE)
        if self.n_floors < 1:
            raise InputRangeError(f"n_floors must be >= 1, got {self.n_floors}")
        if not self.floor_mass > 0:
            raise ConfigurationError("floor_mass", f"must be > 0, got {self.floor_mass}")
        if self.k_story is None:
            for name in ("floor_length", "floor_thickness", "floor_width", "youngs_modulus"):
                if not getattr(self, name) > 0:
                    raise ConfigurationError(name, f"must be > 0, got {getattr(self, name)}")
        elif not self.k_story > 0:
            raise ConfigurationError("k_story", f"must be > 0, got {self.k_story}")
        if not self.zeta_target >= 0:
            raise ConfigurationError("zeta_target", f"must be >= 0, got {self.zeta_target}")
        if self.on_singular not in ("raise", "skip"):
            raise ConfigurationError("on_singular", f"expected raise or skip, got {self.on_singular!r}")
        for i, ab in enumerate(self.absorbers):
            ab.validate(self.n_floors, field=f"absorbers[{i}]")

        ra = self.random_absorbers
        if self.absorber_mode is AbsorberMode.RANDOM:
            if ra.count < 0:
                raise ConfigurationError("random_absorbers.count", f"must be >= 0, got {ra.count}")
            if not ra.mass > 0:
                raise ConfigurationError("random_absorbers.mass", f"must be > 0, got {ra.mass}")
            if not 0 < ra.stiffness[0] <= ra.stiffness[1]:
                raise ConfigurationError("random_absorbers.stiffness", f"need 0 < low <= high, got {ra.stiffness}")
            if not 0 <= ra.damping[0] <= ra.damping[1]:
                raise ConfigurationError("random_absorbers.damping", f"need 0 <= low <= high, got {ra.damping}")

        sw = self.sweep
        if sw.n_points < 1:
            raise InputRangeError(f"sweep.n_points must be >= 1, got {sw.n_points}")
        if sw.w_min < 0 or sw.w_max < sw.w_min:
            raise InputRangeError(f"sweep range [{sw.w_min}, {sw.w_max}] is invalid")
        if sw.n_points > 1 and not sw.w_max > sw.w_min:
            raise InputRangeError(f"sweep step must be > 0, got range [{sw.w_min}, {sw.w_max}] "
                                  f"with {sw.n_points} points")
        return self


def _num(data, key, cast, default=None):
    val = data.get(key)
    if val is None:
        return default
    try:
        # YAML reads "1e6" as a string
        num = float(val)
    except (TypeError, ValueError):
        raise ConfigurationError(key, f"cannot read {val!r} as {cast.__name__}")
    if cast is int:
        if not num.is_integer():
            raise ConfigurationError(key, f"expected a whole number, got {val!r}")
        return int(num)
    return num


def _flag(data, key, default=False):
    val = data.get(key, default)
    if not isinstance(val, bool):
        raise ConfigurationError(key, f"expected true or false, got {val!r}")
    return val


def _enum(data, key, enum_cls, default):
    val = data.get(key, default)
    if isinstance(val, enum_cls):
        return val
    try:
        return enum_cls(str(val).lower())
    except ValueError:
        raise ConfigurationError(key, f"expected one of {[e.value for e in enum_cls]}, got {val!r}")


def _pair(data, key, default):
    val = data.get(key, default)
    try:
        lo, hi = val
        return float(lo), float(hi)
    except (TypeError, ValueError):
        raise ConfigurationError(f"random_absorbers.{key}", f"expected [low, high], got {val!r}")


def _absorbers(raw):
    if raw is None:
        return []
    if isinstance(raw, dict):
        try:
            return absorbers_from_arrays(raw["mass"], raw["stiffness"],
                                         raw.get("damping", [0.0]*len(raw["mass"])), raw["floor"])
        except KeyError as e:
            raise ConfigurationError("absorbers", f"missing array {e}")
        except ConfigurationError:
            raise
        except (TypeError, ValueError):
            raise ConfigurationError("absorbers", "arrays must hold numbers")
    out = []
    for i, rec in enumerate(raw):
        if not isinstance(rec, dict):
            raise ConfigurationError(f"absorbers[{i}]", "expected a mapping")
        try:
            out.append(Absorber(float(rec["mass"]), float(rec["stiffness"]),
                                float(rec.get("damping", 0.0)), int(rec["floor"])))
        except KeyError as e:
            raise ConfigurationError(f"absorbers[{i}]", f"missing key {e}")
        except (TypeError, ValueError):
            raise ConfigurationError(f"absorbers[{i}]", "fields must be numbers")
    return out


def config_from_dict(cfg):
    if not isinstance(cfg, dict):
        raise ConfigurationError("config", "root must be a mapping")
    if "n_floors" not in cfg:
        raise ConfigurationError("n_floors", "is required")

    ra = cfg.get("random_absorbers") or {}
    sw = cfg.get("sweep") or {}
    d = SimConfig()
    return SimConfig(
        n_floors=_num(cfg, "n_floors", int),
        floor_mass=_num(cfg, "floor_mass", float, d.floor_mass),
        k_story=_num(cfg, "k_story", float),
        floor_length=_num(cfg, "floor_length", float, d.floor_length),
        floor_thickness=_num(cfg, "floor_thickness", float, d.floor_thickness),
        floor_width=_num(cfg, "floor_width", float, d.floor_width),
        youngs_modulus=_num(cfg, "youngs_modulus", float, d.youngs_modulus),
        zeta_target=_num(cfg, "zeta_target", float, 0.0),
        absorber_mode=_enum(cfg, "absorber_mode", AbsorberMode, AbsorberMode.NONE),
        absorbers=_absorbers(cfg.get("absorbers")),
        random_absorbers=RandomAbsorbers(
            count=_num(ra, "count", int, 0),
            mass=_num(ra, "mass", float, 0.05),
            stiffness=_pair(ra, "stiffness", (100.0, 400.0)),
            damping=_pair(ra, "damping", (0.0, 1.0)),
        ),
        seed=_num(cfg, "seed", int),
        displacement_mode=_enum(cfg, "displacement_mode", DisplacementMode, DisplacementMode.MAGNITUDE),
        show_absorber_displacement=_flag(cfg, "show_absorber_displacement"),
        on_singular=str(cfg.get("on_singular", "raise")),
        sweep=Sweep(
            w_min=_num(sw, "w_min", float, 1.0),
            w_max=_num(sw, "w_max", float, 130.0),
            n_points=_num(sw, "n_points", int, 1000),
        ),
    ).validate()


def load_config(path):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError("config", f"invalid YAML ({e})")
    if cfg is None:
        raise ConfigurationError("config", "file is empty")
    return config_from_dict(cfg)
