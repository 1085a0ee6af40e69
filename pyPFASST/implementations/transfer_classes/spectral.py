import numpy as np

from pyPFASST.core.encapsulation import integer_root
from pyPFASST.core.errors import NonCubeShapeError, TransferError, UnsupportedCoarseningError
from pyPFASST.helpers.fft_helper import FFT
from pyPFASST.implementations.transfer_classes.polynomial import PolynomialTransfer


class SpectralTransfer(PolynomialTransfer):
    """
    Transfer between periodic grids on the unit (hyper-)cube in one, two or three dimensions

    Interpolation pads the coarse spectrum with zeros (high frequencies), restriction is plain injection, i.e. taking
    every `coarsening_factor`-th point along each axis. Both grids have to be cubes and the fine side length has to be
    `coarsening_factor` times the coarse one.

    Attributes:
        fft (FFT): FFT helper with cached workspaces
    """

    def __init__(self, params=None):
        super().__init__(params)
        self.fft = FFT()

    def get_sides(self, coarse, fine):
        """
        Check the shapes of the two containers and compute their side lengths

        Args:
            coarse (Encapsulation): coarse data
            fine (Encapsulation): fine data

        Returns:
            tuple of int: coarse and fine side length

        Raises:
            TransferError: if the dimensionality does not match
            NonCubeShapeError: if any of the containers does not hold data on a cube
            UnsupportedCoarseningError: if the side lengths do not differ by the coarsening factor
        """
        if coarse.DIM != fine.DIM:
            msg = f'cannot transfer between {coarse.DIM}-dimensional and {fine.DIM}-dimensional data'
            self.logger.error(msg)
            raise TransferError(msg)

        dim = fine.DIM
        coarse_side = integer_root(coarse.size, dim)
        fine_side = integer_root(fine.size, dim)

        if coarse_side is None or fine_side is None:
            msg = f'number of degrees of freedom ({coarse.size} and {fine.size}) do not form {dim}-dimensional cubes'
            self.logger.error(msg)
            raise NonCubeShapeError(msg)

        if fine_side != self.params.coarsening_factor * coarse_side:
            msg = (
                f'only coarsening factor of {self.params.coarsening_factor} is supported, got fine side {fine_side} '
                f'and coarse side {coarse_side}'
            )
            self.logger.error(msg)
            raise UnsupportedCoarseningError(msg)

        return coarse_side, fine_side

    @staticmethod
    def get_index_map(coarse_side, fine_side):
        """
        Position of each coarse frequency in the fine spectrum along one axis

        The first half of the coarse frequencies (non-negative ones) keeps its index, the second half (negative ones)
        is moved to the end of the fine spectrum.

        Args:
            coarse_side (int): coarse number of points along the axis
            fine_side (int): fine number of points along the axis

        Returns:
            numpy.ndarray: fine index for each coarse index
        """
        half = (coarse_side + 1) // 2
        idx = np.arange(coarse_side)
        return np.where(idx < half, idx, fine_side - coarse_side + idx)

    def interpolate_data(self, coarse, fine):
        """
        Spectral interpolation of coarse data onto the fine grid

        Args:
            coarse (Encapsulation): coarse data
            fine (Encapsulation): container receiving the fine data
        """
        if coarse.DIM == fine.DIM and coarse.size == fine.size:
            fine.copy_from(coarse)
            return

        coarse_side, fine_side = self.get_sides(coarse, fine)
        dim = fine.DIM

        coarse_z = self.fft.forward(coarse)
        fine_z = self.fft.get_workspace((fine_side,) * dim)
        fine_z[...] = 0.0

        # forward transform is not normalized
        idx = self.get_index_map(coarse_side, fine_side)
        fine_z[np.ix_(*([idx] * dim))] = coarse_z / coarse.size

        self.fft.backward(fine_z, fine)

    def restrict_data(self, fine, coarse):
        """
        Restriction by injection, i.e. taking every n-th point along each axis

        Args:
            fine (Encapsulation): fine data
            coarse (Encapsulation): container receiving the coarse data
        """
        if coarse.DIM == fine.DIM and coarse.size == fine.size:
            coarse.copy_from(fine)
            return

        coarse_side, fine_side = self.get_sides(coarse, fine)
        factor = fine_side // coarse_side

        coarse.as_grid()[...] = fine.as_grid()[(slice(None, None, factor),) * fine.DIM]
