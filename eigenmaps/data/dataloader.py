# Generates synthetic manifold datasets (stochastic process on a sphere, swiss roll, S-curve) or loads a numeric csv file

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Literal
import numpy as np
from pathlib import Path
import pandas as pd
from sklearn.datasets import make_s_curve, make_swiss_roll

from eigenmaps.utils.functions import generate_stochastic_process_on_sphere

@dataclass
class DataLoader_:
    """
    Parameters
    ----------
    exp_type: Type of the experiment # Default None
    N: Optional[int] = 1 # Number of replicate datasets
    n_samples: Optional[int] = 1000 # Samples per dataset
    noise: Optional[float] = 0.0 # Standard deviation of the gaussian noise added to the samples
    D: Optional[int] = 3 # Ambient dimension, extra coordinates are zero padded before the noise
    exp_seed_start: Optional[int] = 1
    csv_path: Optional[str | Path] = None # Data file for exp_type "CSV", one sample per row

    """
    exp_type: Optional[Literal["Sphere", "SwissRoll", "SCurve", "CSV"]] = None
    N: Optional[int] = 1
    n_samples: Optional[int] = 1000
    noise: Optional[float] = 0.0
    D: Optional[int] = 3
    exp_seed_start: Optional[int] = 1
    csv_path: Optional[str | Path] = None

    def __post_init__(self) -> None:
        if self.exp_type not in ("Sphere", "SwissRoll", "SCurve", "CSV"):
            raise ValueError(f"Unsupported exp_type: {self.exp_type}")
        if self.exp_type == "CSV":
            if self.csv_path is None:
                raise ValueError("csv_path is required for exp_type CSV")
            self.data_path = Path(self.csv_path)
            self.len = 1
        else:
            self.data_path = None
            self.len = self.N
        if self.D < 3:
            raise ValueError(f"D must be at least 3, got {self.D}")

    def __read_csv__(self) -> np.ndarray:
        return pd.read_csv(self.data_path, header=None).to_numpy(dtype=float)

    def __synthetic_generator__(self, seed: int) -> np.ndarray:
        rng = np.random.RandomState(seed)
        if self.exp_type == "Sphere":
            data = generate_stochastic_process_on_sphere(n=self.n_samples, d=3, seed=seed)
        elif self.exp_type == "SwissRoll":
            data, _ = make_swiss_roll(n_samples=self.n_samples, random_state=rng)
        else:
            data, _ = make_s_curve(n_samples=self.n_samples, random_state=rng)

        padding = np.zeros((self.n_samples, self.D - data.shape[1]))
        data = np.hstack((data, padding))
        if self.noise:
            data = data + rng.normal(scale=self.noise, size=data.shape)
        return data

    def get_item(self, idx) -> np.ndarray:
        if idx < 0 or idx >= len(self):
            raise IndexError(f"Dataset index {idx} out of range for {len(self)} datasets")
        if self.exp_type == "CSV":
            return self.__read_csv__()
        return self.__synthetic_generator__(self.exp_seed_start + idx)

    def __len__(self):
        return self.len

    def __iter__(self):
        for i in range(len(self)):
            yield self.get_item(i)
