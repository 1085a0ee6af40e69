import logging

import numpy as np

from pyPFASST.core.errors import DataError


def integer_root(num, dim):
    """
    Helper routine to compute the exact integer dim-th root of num

    Args:
        num (int): the number to take the root from
        dim (int): the order of the root

    Returns:
        int: the root or None if num is not a dim-th power of an integer
    """
    if dim == 1:
        return int(num)
    root = int(round(num ** (1.0 / dim)))
    # floating point roots can be off by one for large numbers
    for candidate in [root - 1, root, root + 1]:
        if candidate >= 0 and candidate**dim == num:
            return candidate
    return None


class Encapsulation(np.ndarray):
    """
    Numpy-based state container holding a fixed-length buffer of degrees of freedom

    The buffer is always stored flat. Subclasses tag it with the spatial dimensionality `DIM`, so that transfer
    operators can interpret it as samples on a cube grid with `n**DIM` points (row-major ordering).
    """

    DIM = None

    def __new__(cls, init, val=0.0):
        """
        Instantiates new datatype. This ensures that even when manipulating data, the result is still an Encapsulation.

        Args:
            init: either another Encapsulation, a numpy array with the data or the number of degrees of freedom
            val: value to initialize with (only used if init is the number of degrees of freedom)

        Returns:
            obj of type cls
        """
        if isinstance(init, Encapsulation):
            if init.DIM != cls.DIM:
                raise DataError(f'cannot create {cls.__name__} from data of dimension {init.DIM}')
            obj = np.ndarray.__new__(cls, shape=(init.size,), dtype=init.dtype)
            obj[:] = init.ravel()[:]
        elif isinstance(init, np.ndarray):
            obj = np.ndarray.__new__(cls, shape=(init.size,), dtype=np.float64)
            obj[:] = init.ravel()[:]
        elif isinstance(init, (int, np.integer)):
            if init < 0:
                raise DataError(f'number of degrees of freedom has to be non-negative, got {init}')
            obj = np.ndarray.__new__(cls, shape=(int(init),), dtype=np.float64)
            obj.fill(val)
        else:
            raise DataError(f'cannot instantiate {cls.__name__} from {type(init)}')
        return obj

    @property
    def data(self):
        """
        Raw (writable) access to the buffer

        Returns:
            numpy.ndarray: plain numpy view on the data
        """
        return self.view(np.ndarray)

    @property
    def num_dofs(self):
        return self.size

    @property
    def dimwise_num_dofs(self):
        """
        Number of degrees of freedom along each axis

        Returns:
            tuple of int: DIM times the side length of the cube
        """
        side = integer_root(self.size, self.DIM)
        if side is None:
            raise DataError(f'{self.size} degrees of freedom do not form a {self.DIM}-dimensional cube')
        return (side,) * self.DIM

    def as_grid(self):
        """
        Returns:
            numpy.ndarray: view on the data shaped as a cube
        """
        return self.data.reshape(self.dimwise_num_dofs)

    def is_compatible(self, other):
        """
        Two containers are compatible iff they have the same dimensionality and number of degrees of freedom

        Args:
            other: the other container

        Returns:
            bool
        """
        return isinstance(other, Encapsulation) and other.DIM == self.DIM and other.size == self.size

    def _check_compatible(self, other, operation):
        if not self.is_compatible(other):
            msg = (
                f'cannot {operation} {type(other).__name__} of size {getattr(other, "size", None)} and '
                f'{type(self).__name__} of size {self.size}'
            )
            logging.getLogger('encapsulation').error(msg)
            raise DataError(msg)

    def zero(self):
        """
        Set all degrees of freedom to zero
        """
        self.fill(0.0)

    def copy_from(self, other):
        """
        Copy the data of a compatible container into this one

        Args:
            other (Encapsulation): the source
        """
        self._check_compatible(other, 'copy')
        self.data[:] = other.data

    def scaled_add(self, a, other):
        """
        In-place AXPY operation: self = self + a * other

        Args:
            a (float): scalar
            other (Encapsulation): compatible container
        """
        self._check_compatible(other, 'add')
        self.data[:] += a * other.data

    def norm0(self):
        """
        Maximum norm of the data

        Returns:
            float: absolute maximum of all values
        """
        if self.size == 0:
            return 0.0
        return float(np.amax(np.abs(self.data)))

    def __abs__(self):
        return self.norm0()


class EncapFactory(object):
    """
    Factory creating zero-initialized containers of a configured type and size

    Attributes:
        encap_class: the container type
        size (int): number of degrees of freedom of the created containers
    """

    def __init__(self, encap_class, size=None):
        self.encap_class = encap_class
        self.size = size

    def set_size(self, size):
        self.size = size

    def create(self):
        """
        Returns:
            Encapsulation: new container filled with zeros
        """
        if self.size is None:
            raise DataError(f'size of {self.encap_class.__name__} factory not yet set')
        return self.encap_class(self.size, val=0.0)
