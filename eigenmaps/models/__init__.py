from eigenmaps.models.laplacian_eigenmap import EmbeddingResult, LaplacianEigenmap, embed

LE = LaplacianEigenmap
