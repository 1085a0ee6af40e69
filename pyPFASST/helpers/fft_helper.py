import logging

import numpy as np


class FFT(object):
    """
    Helper for multi-dimensional FFTs on the cube-shaped data of an encapsulation

    Both transforms are unnormalized, i.e. a forward transform followed by a backward transform scales the data by the
    number of degrees of freedom. Complex workspaces are cached per shape and reused.

    Attributes:
        workspaces (dict): complex work arrays keyed by their shape
    """

    def __init__(self):
        self.logger = logging.getLogger('fft')
        self.workspaces = {}

    def get_workspace(self, shape):
        """
        Get the (cached) complex work array for the given shape

        Args:
            shape (tuple of int): shape of the data

        Returns:
            numpy.ndarray: complex work array
        """
        shape = tuple(shape)
        if shape not in self.workspaces:
            self.logger.debug(f'allocating new workspace of shape {shape}')
            self.workspaces[shape] = np.zeros(shape, dtype=np.complex128)
        return self.workspaces[shape]

    def forward(self, x):
        """
        Unnormalized forward transform

        Args:
            x (Encapsulation): the data in physical space

        Returns:
            numpy.ndarray: the workspace holding the spectrum, shaped like the cube grid
        """
        grid = x.as_grid()
        z = self.get_workspace(grid.shape)
        z[...] = np.fft.fftn(grid)
        return z

    def backward(self, z, x):
        """
        Unnormalized backward transform into the given container, keeping only the real part

        Args:
            z (numpy.ndarray): the spectrum, shaped like the cube grid of x
            x (Encapsulation): container receiving the data in physical space
        """
        x.as_grid()[...] = np.real(np.fft.ifftn(z, norm='forward'))
