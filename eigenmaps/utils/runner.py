import os
from typing import Iterable, Any, Dict
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
import numpy as np
import pandas as pd

import eigenmaps.models as models
from eigenmaps.utils.ExperimentConfig import ExperimentConfig
from eigenmaps.utils.functions import embedding_plot, embedding_summary, threeD_plot


class Runner:
    def __init__(
        self,
        dataloader: Iterable[Any],
        cfg: ExperimentConfig = ExperimentConfig(),
        n_workers: int = None,
        ):
        self.dataloader = dataloader
        self.cfg = cfg
        self.n_workers = n_workers

        root = Path(cfg.output_root) if cfg.output_root is not None else Path.cwd()
        self.directory = root / "experiments" / cfg.exp_name
        os.makedirs(self.directory, exist_ok=True)

    def compute(self, data) -> "models.EmbeddingResult":
        model = models.LE(
            n_components=self.cfg.n_components,
            n_neighbors=self.cfg.n_neighbors,
            width=self.cfg.width,
            metric=self.cfg.metric,
            eigen_solver=self.cfg.eigen_solver,
            oversampling=self.cfg.oversampling,
            random_state=self.cfg.random_state,
            verbose=self.cfg.verbose,
        )
        model.fit(data)
        return model.result_

    def writer_(self, idx: int, n_samples: int, res: "models.EmbeddingResult") -> Dict[str, Any]:
        n = len(res.sample_indices)
        res.to_frame().to_csv(self.directory / f"ID-{idx}-n-{n}.csv")
        if self.cfg.save_plots:
            embedding_plot(res.coordinates, self.directory / f"ID-{idx}-n-{n}.png",
                           color=res.sample_indices, figure_title=f"Dataset {idx}")

        row = {
            "ID": idx,
            "n_samples": n_samples,
            "n_retained": n,
            "n_edges": res.graph.n_edges,
            "kernel_width": res.kernel_width,
        }
        row.update({f"lambda{j + 1}": val for j, val in enumerate(res.eigenvalues)})
        pd.DataFrame([row]).to_csv(self.directory / f"ID-{idx}-summary.csv", index=False)
        return row

    def process(self, idx, data):
        data = np.asarray(data)
        res = self.compute(data=data)
        if self.cfg.save_plots and data.ndim == 2 and data.shape[1] >= 3:
            threeD_plot(data[res.sample_indices], self.directory / f"ID-{idx}-input.png", color=res.coordinates[:, 0])
        return self.writer_(idx, len(data), res)

    def run(self) -> pd.DataFrame:
        ids = []
        if self.n_workers in (None, 1):
            for idx, data in enumerate(self.dataloader):
                if self.cfg.verbose:
                    print(f"Dataset {idx}: {np.shape(data)}")
                ids.append(self.process(idx, data)["ID"])
        else:
            max_workers = self.n_workers or max(1, (os.cpu_count() or 1))
            os.environ["OMP_NUM_THREADS"] = "1"
            os.environ["MKL_NUM_THREADS"] = "1"
            # IMPORTANT on Windows: call this under if __name__ == "__main__"
            with ProcessPoolExecutor(max_workers=max_workers) as ex:
                futures = [ex.submit(self.process, idx, data)
                           for idx, data in enumerate(self.dataloader)]

                for fut in as_completed(futures):
                    ids.append(fut.result()["ID"])
        # Summary files left in the directory by earlier runs are not collected.
        return embedding_summary(self.directory, ids=sorted(ids))
