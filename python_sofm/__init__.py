"""Python implementation of the self-organizing feature map (SOFM).

Most features were implemented using NumPy, with Scikit-learn for input validation and
random state handling.

Features:
    - Grid four, grid eight, honeycomb and function-neighbor lattices
    - Random, random centroid, random surface and uniform grid weight initialization
    - Stepwise training with decaying learning rate and neighborhood radius
    - Autostop on convergence of the weights
    - Captured objects, awards and winner counts of the neurons
    - Support for NumPy arrays, Pandas DataFrames and regular lists of values
"""

from .exceptions import ConfigurationError, InvalidInputError, SOMError
from .initialization import initialize_weights
from .lattice import Lattice, neighbor_weight
from .parameters import ConnectionType, InitType, SOMParameters, TrainingState
from .som import SOM, exponential_decay, linear_decay

__version__ = "0.1.0"

__all__ = [
    "SOM",
    "SOMParameters",
    "exponential_decay",
    "linear_decay",
    "ConnectionType",
    "InitType",
    "TrainingState",
    "Lattice",
    "neighbor_weight",
    "initialize_weights",
    "SOMError",
    "ConfigurationError",
    "InvalidInputError",
]
