from pathlib import Path
from typing import Optional, Union

class ExperimentConfig:
    exp_name: str = 'Test'
    n_components: int = 2
    n_neighbors: int = 10
    width: float = -1.0
    metric: Optional[str] = "euclidean"
    eigen_solver: str = "arpack"
    oversampling: int = 10
    random_state: Optional[int] = 0
    save_plots: bool = False
    verbose: bool = False
    output_root: Optional[Union[str, Path]] = None
