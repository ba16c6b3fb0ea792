from eigenmaps.models.laplacian import GraphLaplacian, build_laplacian
from eigenmaps.models.laplacian_eigenmap import EmbeddingResult, LaplacianEigenmap, embed
from eigenmaps.models.spectral import DegenerateEmbeddingWarning, InsufficientSpectrumError
from eigenmaps.utils.graph import NeighborGraph, build_knn_graph, largest_connected_component
