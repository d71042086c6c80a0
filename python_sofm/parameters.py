"""Connection types, initialization types and training parameters of the map."""

from dataclasses import dataclass
from enum import Enum

from .exceptions import ConfigurationError


class ConnectionType(Enum):
    """Connectivity between neurons of the lattice."""

    GRID_FOUR = "grid_four"
    GRID_EIGHT = "grid_eight"
    HONEYCOMB = "honeycomb"
    FUNC_NEIGHBOR = "func_neighbor"


class InitType(Enum):
    """Strategy for the initial weights of the neurons."""

    RANDOM = "random"
    RANDOM_CENTROID = "random_centroid"
    RANDOM_SURFACE = "random_surface"
    UNIFORM_GRID = "uniform_grid"


class TrainingState(Enum):
    """State of the training process of a map."""

    IDLE = "idle"
    RUNNING = "running"
    CONVERGED = "converged"
    EPOCH_LIMIT_REACHED = "epoch_limit_reached"


def _coerce(enum_type: type, value: Enum | str, name: str) -> Enum:
    """
    Converts a string (or a member) to a member of enum_type.

    Hyphens are accepted in place of underscores, e.g. 'random-centroid'.

    :param enum_type: Enum class to convert to.
    :param value: str or Enum: Value to convert.
    :param name: str: Parameter name, used in the error message.
    :return: Enum: Member of enum_type.
    """
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).lower().replace("-", "_"))
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid value for '{name}' parameter. Value should be in "
            + str([member.value for member in enum_type])
        ) from exc


def as_connection_type(value: ConnectionType | str) -> ConnectionType:
    return _coerce(ConnectionType, value, "conn_type")  # type: ignore


def as_init_type(value: InitType | str) -> InitType:
    return _coerce(InitType, value, "init_type")  # type: ignore


def default_init_radius(rows: int, cols: int) -> float:
    """
    Initial neighborhood radius for a map without an explicit one.

    :param rows: int: Number of rows of the map.
    :param cols: int: Number of columns of the map.
    :return: float: 2.0 for large maps, 1.5 for small 2D maps, 1.0 for single rows or columns.
    """
    if (rows + cols) / 4.0 > 1.0:
        return 2.0
    if rows > 1 and cols > 1:
        return 1.5
    return 1.0


@dataclass
class SOMParameters:
    """
    Training parameters of the self-organizing feature map.

    :param init_type: InitType or str: Weight initialization strategy. Defaults to 'uniform_grid'.
    :param init_radius: float or None: Initial neighborhood radius, in lattice units.
        If None, it is selected from the map size when the map is created.
    :param init_learn_rate: float: Initial learning rate, in (0, 1]. Defaults to 0.1.
    :param adaptation_threshold: float: Maximal weight change below which training stops
        when autostop is enabled. Defaults to 0.001.
    :param random_seed: int or None: Seed for the random initialization strategies.
    """

    init_type: InitType | str = InitType.UNIFORM_GRID
    init_radius: float | None = None
    init_learn_rate: float = 0.1
    adaptation_threshold: float = 0.001
    random_seed: int | None = None

    def validate(self) -> None:
        """
        Checks the parameter values, converting init_type to InitType.

        :raises ConfigurationError: If any value is out of range.
        """
        self.init_type = as_init_type(self.init_type)
        if self.init_radius is not None and self.init_radius < 0:
            raise ConfigurationError("init_radius must be non-negative")
        if not 0.0 < self.init_learn_rate <= 1.0:
            raise ConfigurationError("init_learn_rate must be in the interval (0, 1]")
        if self.adaptation_threshold < 0:
            raise ConfigurationError("adaptation_threshold must be non-negative")
