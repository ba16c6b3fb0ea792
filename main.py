import argparse
from eigenmaps.data.dataloader import DataLoader_
from eigenmaps.utils.runner import Runner
from eigenmaps.utils.ExperimentConfig import ExperimentConfig


def make_runner(**kwargs) -> Runner:
    exp_type = kwargs.pop("exp_type")
    n_workers = kwargs.pop("n_workers")

    data_loader = DataLoader_(
        exp_type=exp_type,
        N=kwargs.pop("N"),
        n_samples=kwargs.pop("n_samples"),
        noise=kwargs.pop("noise"),
        D=kwargs.pop("ambient_dim"),
        exp_seed_start=kwargs.pop("seed"),
        csv_path=kwargs.pop("csv_path", None),
    )

    exp_config = ExperimentConfig()
    exp_config.exp_name = kwargs.pop("exp_name")
    exp_config.n_components = kwargs.pop("d")
    exp_config.n_neighbors = kwargs.pop("k")
    exp_config.width = kwargs.pop("t")
    exp_config.metric = kwargs.pop("metric")
    exp_config.eigen_solver = kwargs.pop("eigen_solver")
    exp_config.oversampling = kwargs.pop("oversampling")
    exp_config.save_plots = bool(kwargs.pop("save_plots"))
    exp_config.verbose = bool(kwargs.pop("verbose"))
    exp_config.output_root = kwargs.pop("output_root", None)

    return Runner(data_loader, exp_config, n_workers=n_workers)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run Laplacian Eigenmap experiment")
    parser.add_argument("--exp-type", type=str, required=True, choices=["Sphere", "SwissRoll", "SCurve", "CSV"])
    parser.add_argument("--exp-name", type=str, default="Test")
    parser.add_argument("--csv-path", type=str, default=None)
    parser.add_argument("--n-workers", type=int, default=1)
    parser.add_argument("--N", type=int, default=1)
    parser.add_argument("--n-samples", type=int, default=1000)
    parser.add_argument("--noise", type=float, default=0.0)
    parser.add_argument("--ambient-dim", type=int, default=3)
    parser.add_argument("--seed", type=int, default=1)
    parser.add_argument("--k", type=int, default=10)
    parser.add_argument("--d", type=int, default=2)
    parser.add_argument("--t", type=float, default=-1.0, help="Heat kernel width, non-positive for discrete weights")
    parser.add_argument("--metric", type=str, default="euclidean")
    parser.add_argument("--eigen-solver", type=str, default="arpack", choices=["arpack", "dense"])
    parser.add_argument("--oversampling", type=int, default=10)
    parser.add_argument("--save-plots", type=int, choices=[0, 1], default=0)
    parser.add_argument("--verbose", type=int, choices=[0, 1], default=0)
    parser.add_argument("--output-root", type=str, default=None)
    return parser


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)

    # Forward all args at once
    runner = make_runner(**vars(args))
    runner.run()


if __name__ == "__main__":
    main()
