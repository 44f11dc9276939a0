from .sinc import Dataset, safe_sinc, sinc, sinc_dataset, uniform_points

__all__ = ["Dataset", "safe_sinc", "sinc", "sinc_dataset", "uniform_points"]
