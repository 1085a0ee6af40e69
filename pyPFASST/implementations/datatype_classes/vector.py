from pyPFASST.core.encapsulation import Encapsulation
from pyPFASST.core.errors import ParameterError


class Vector1D(Encapsulation):
    """
    Flat vector of degrees of freedom on a one-dimensional grid
    """

    DIM = 1


class Cube2D(Encapsulation):
    """
    Degrees of freedom on a square grid with n x n points, stored row-major
    """

    DIM = 2


class Cube3D(Encapsulation):
    """
    Degrees of freedom on a cube grid with n x n x n points, stored row-major (z, y, x)
    """

    DIM = 3


def get_vector_class(dim):
    """
    Helper routine to select the container type for a given spatial dimensionality

    Args:
        dim (int): number of spatial dimensions

    Returns:
        type: Vector1D, Cube2D or Cube3D
    """
    classes = {1: Vector1D, 2: Cube2D, 3: Cube3D}
    if dim not in classes:
        raise ParameterError(f'no vector type for {dim} dimensions, choose from {list(classes.keys())}')
    return classes[dim]
