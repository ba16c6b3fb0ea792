"""Tests for the data loader, the batch runner and the command line entry point."""

import numpy as np
import pandas as pd
import pytest

from eigenmaps.data.dataloader import DataLoader_
from eigenmaps.utils.ExperimentConfig import ExperimentConfig
from eigenmaps.utils.functions import embedding_plot, generate_stochastic_process_on_sphere
from eigenmaps.utils.runner import Runner
from main import build_parser, main, make_runner


def _config(tmp_path, **overrides):
    cfg = ExperimentConfig()
    cfg.exp_name = "unit"
    cfg.n_neighbors = 8
    cfg.output_root = tmp_path
    for key, value in overrides.items():
        setattr(cfg, key, value)
    return cfg


class TestDataLoader:

    @pytest.mark.parametrize("exp_type", ["Sphere", "SwissRoll", "SCurve"])
    def test_synthetic_shapes(self, exp_type):
        loader = DataLoader_(exp_type=exp_type, N=3, n_samples=50, D=5, noise=0.01)
        datasets = list(loader)
        assert len(loader) == 3
        assert len(datasets) == 3
        assert all(data.shape == (50, 5) for data in datasets)
        assert not np.array_equal(datasets[0], datasets[1])

    def test_replicates_are_reproducible(self):
        loader = DataLoader_(exp_type="SwissRoll", N=2, n_samples=40)
        np.testing.assert_array_equal(loader.get_item(1), DataLoader_(exp_type="SwissRoll", N=2, n_samples=40).get_item(1))

    def test_sphere_points_lie_on_sphere(self):
        data = generate_stochastic_process_on_sphere(n=100, seed=3)
        np.testing.assert_allclose(np.linalg.norm(data, axis=1), 1.0)

    def test_csv(self, tmp_path):
        path = tmp_path / "points.csv"
        pd.DataFrame(np.arange(12.0).reshape(4, 3)).to_csv(path, header=False, index=False)
        loader = DataLoader_(exp_type="CSV", csv_path=path)
        assert len(loader) == 1
        np.testing.assert_array_equal(next(iter(loader)), np.arange(12.0).reshape(4, 3))

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            DataLoader_(exp_type="TE")

    def test_csv_requires_path(self):
        with pytest.raises(ValueError):
            DataLoader_(exp_type="CSV")

    def test_index_out_of_range(self):
        with pytest.raises(IndexError):
            DataLoader_(exp_type="Sphere", N=1, n_samples=10).get_item(1)


class TestRunner:

    def test_run_writes_coordinates_and_summary(self, tmp_path):
        loader = DataLoader_(exp_type="SwissRoll", N=2, n_samples=120)
        summary = Runner(loader, _config(tmp_path)).run()

        directory = tmp_path / "experiments" / "unit"
        assert list(summary["ID"]) == [0, 1]
        assert set(summary.columns) >= {"n_samples", "n_retained", "n_edges", "kernel_width", "lambda1", "lambda2"}
        assert (directory / "embedding_summary.csv").exists()
        for _, row in summary.iterrows():
            table = pd.read_csv(directory / f"ID-{int(row['ID'])}-n-{int(row['n_retained'])}.csv", index_col="sample")
            assert list(table.columns) == ["LE1", "LE2"]
            assert len(table) == row["n_retained"]
            np.testing.assert_allclose(np.linalg.norm(table.to_numpy(), axis=0), 1.0)

    def test_summary_ignores_earlier_runs(self, tmp_path):
        Runner(DataLoader_(exp_type="SCurve", N=3, n_samples=60), _config(tmp_path)).run()
        summary = Runner(DataLoader_(exp_type="SCurve", N=1, n_samples=60), _config(tmp_path)).run()
        assert list(summary["ID"]) == [0]
        saved = pd.read_csv(tmp_path / "experiments" / "unit" / "embedding_summary.csv")
        assert list(saved["ID"]) == [0]

    def test_save_plots(self, tmp_path):
        loader = DataLoader_(exp_type="Sphere", N=1, n_samples=80)
        Runner(loader, _config(tmp_path, save_plots=True, n_components=1)).run()
        assert list((tmp_path / "experiments" / "unit").glob("ID-0-n-*.png"))
        assert (tmp_path / "experiments" / "unit" / "ID-0-input.png").exists()

    def test_embedding_plot(self, tmp_path):
        path = tmp_path / "plot.png"
        embedding_plot(np.random.RandomState(0).normal(size=(20, 2)), path, color=np.arange(20), figure_title="t")
        assert path.exists()


class TestMain:

    def test_make_runner(self, tmp_path):
        args = build_parser().parse_args(
            ["--exp-type", "SCurve", "--N", "2", "--k", "6", "--t", "0.5", "--output-root", str(tmp_path)])
        runner = make_runner(**vars(args))
        assert len(runner.dataloader) == 2
        assert runner.cfg.n_neighbors == 6
        assert runner.cfg.width == 0.5

    def test_main(self, tmp_path):
        main(["--exp-type", "Sphere", "--exp-name", "cli", "--n-samples", "60", "--k", "6", "--d", "1",
              "--output-root", str(tmp_path)])
        summary = pd.read_csv(tmp_path / "experiments" / "cli" / "embedding_summary.csv")
        assert len(summary) == 1
        assert summary.loc[0, "n_samples"] == 60
