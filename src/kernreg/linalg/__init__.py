from .checks import as_matrix, as_vector, frozen
from .solve import solve_spd

__all__ = ["as_matrix", "as_vector", "frozen", "solve_spd"]
