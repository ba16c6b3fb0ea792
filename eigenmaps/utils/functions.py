import numpy as np
import matplotlib.pyplot as plt
import pandas as pd
from pathlib import Path


def generate_stochastic_process_on_sphere(n, sigma=0.3, d=3, r=1, seed=None):
    '''
    Generates a stochastic process on d - 1 dimensional sphere
    Input:
    n       - number of points to be generated
    sigma   - step size of the random walk
    d       - dimension of the hypersphere + 1
    r       - radius of the hypersphere
    seed    - seed of the random generator
    Output:
    data    - np.array in shape of (n,d)
    '''
    rng = np.random.RandomState(seed)

    X_0 = rng.normal(scale=sigma, size=d)
    X_0 = X_0/np.linalg.norm(X_0)
    data = np.zeros((n,d))

    for i in range(n):
        gaussian_error = rng.normal(scale=sigma, size=d)
        base = X_0 if i == 0 else data[i - 1]
        perturbed = base + gaussian_error
        data[i] = r * perturbed / np.linalg.norm(perturbed)

    return data


def _color_kwargs(color):
    return {} if color is None else {"c": color, "cmap": "viridis"}


def threeD_plot(data,figure_path,color=None,show=False):
    fig = plt.figure(figsize=(8, 6))
    ax = fig.add_subplot(111, projection='3d')
    ax.scatter(data[:, 0], data[:, 1], data[:, 2], s=4, **_color_kwargs(color))
    ax.set_box_aspect([1, 1, 1])
    plt.tight_layout()
    fig.savefig(figure_path, dpi=300, transparent=True)
    if show:
        plt.show()
    plt.close(fig)


def embedding_plot(coordinates,figure_path,color=None,figure_title=None,show=False):
    '''
    Scatter plot of the first two embedding coordinates, or of the single
    coordinate against the sample order for one-dimensional embeddings.
    '''
    coordinates = np.asarray(coordinates)
    fig, ax = plt.subplots(figsize=(6, 6))
    if coordinates.shape[1] == 1:
        ax.scatter(np.arange(len(coordinates)), coordinates[:, 0], s=6, **_color_kwargs(color))
        ax.set_xlabel('Sample')
        ax.set_ylabel('LE1')
    else:
        ax.scatter(coordinates[:, 0], coordinates[:, 1], s=6, **_color_kwargs(color))
        ax.set_xlabel('LE1')
        ax.set_ylabel('LE2')
    if figure_title:
        ax.set_title(figure_title)
    ax.grid(True)
    fig.tight_layout()
    fig.savefig(figure_path, dpi=300)
    if show:
        plt.show()
    plt.close(fig)


def embedding_summary(root: Path, ids=None) -> pd.DataFrame:
    '''
    Collects the per-dataset rows written by the runner into embedding_summary.csv.
    When ids is given only those datasets are collected, otherwise every ID-*-summary.csv in root.
    '''
    root = Path(root)
    if ids is None:
        files = sorted(root.glob("ID-*-summary.csv"))
    else:
        files = [root / f"ID-{idx}-summary.csv" for idx in ids]
    frames = [pd.read_csv(f) for f in files]
    df = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame()
    if not df.empty:
        df = df.sort_values(by="ID").reset_index(drop=True)
    df.to_csv(root / "embedding_summary.csv", index=False)
    return df
