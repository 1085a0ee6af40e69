import pytest
import numpy as np


def smooth_signal(n, dim):
    """
    Smooth periodic function on a cube grid with n points per dimension
    """
    x = np.arange(n) / n
    grids = np.meshgrid(*([x] * dim), indexing='ij')
    values = np.ones((n,) * dim)
    for d, xd in enumerate(grids):
        values += np.sin(2 * np.pi * xd) + 0.5 * np.cos(2 * np.pi * (d + 1) * xd)
    return values


@pytest.mark.base
@pytest.mark.parametrize('dim', [1, 2, 3])
def test_equal_sizes_are_copied(dim):
    from pyPFASST.implementations.datatype_classes.vector import get_vector_class
    from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

    encap_class = get_vector_class(dim)
    transfer = SpectralTransfer()

    coarse = encap_class(np.random.rand(4**dim))
    fine = encap_class(4**dim)

    transfer.interpolate_data(coarse, fine)
    assert np.array_equal(fine, coarse)

    back = encap_class(4**dim)
    transfer.restrict_data(fine, back)
    assert np.array_equal(back, coarse)


@pytest.mark.base
@pytest.mark.parametrize('n_coarse', [4, 8, 16])
def test_interpolate_restrict_1d(n_coarse):
    from pyPFASST.implementations.datatype_classes.vector import Vector1D
    from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

    transfer = SpectralTransfer()

    coarse = Vector1D(np.random.rand(n_coarse))
    fine = Vector1D(2 * n_coarse)
    transfer.interpolate_data(coarse, fine)

    assert np.allclose(fine[::2], coarse), 'interpolation has to keep the values at the coarse points'

    back = Vector1D(n_coarse)
    transfer.restrict_data(fine, back)
    assert np.allclose(back, coarse)


@pytest.mark.base
@pytest.mark.parametrize('dim', [1, 2, 3])
def test_interpolate_smooth_signal(dim):
    from pyPFASST.implementations.datatype_classes.vector import get_vector_class
    from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

    encap_class = get_vector_class(dim)
    transfer = SpectralTransfer()

    n_coarse = 8
    coarse = encap_class(smooth_signal(n_coarse, dim))
    fine = encap_class((2 * n_coarse) ** dim)
    transfer.interpolate_data(coarse, fine)

    assert fine.dimwise_num_dofs == (2 * n_coarse,) * dim
    assert np.allclose(fine.as_grid(), smooth_signal(2 * n_coarse, dim)), 'resolved modes are not interpolated exactly'

    restricted = encap_class(n_coarse**dim)
    transfer.restrict_data(fine, restricted)
    assert np.allclose(restricted, coarse)


@pytest.mark.base
def test_restriction_takes_every_other_point():
    from pyPFASST.implementations.datatype_classes.vector import Cube2D
    from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

    fine = Cube2D(np.arange(64.0))
    coarse = Cube2D(16)
    SpectralTransfer().restrict_data(fine, coarse)

    assert np.array_equal(coarse.as_grid(), fine.as_grid()[::2, ::2])


@pytest.mark.base
def test_index_map():
    from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

    assert list(SpectralTransfer.get_index_map(4, 8)) == [0, 1, 6, 7]
    assert list(SpectralTransfer.get_index_map(8, 16)) == [0, 1, 2, 3, 12, 13, 14, 15]
    assert list(SpectralTransfer.get_index_map(1, 2)) == [0]


@pytest.mark.base
def test_unsupported_coarsening():
    from pyPFASST.core.errors import TransferError, UnsupportedCoarseningError
    from pyPFASST.implementations.datatype_classes.vector import Vector1D
    from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

    transfer = SpectralTransfer()

    with pytest.raises(UnsupportedCoarseningError) as excinfo:
        transfer.interpolate_data(Vector1D(8), Vector1D(12))
    assert '12' in str(excinfo.value) and '8' in str(excinfo.value)

    with pytest.raises(UnsupportedCoarseningError):
        transfer.restrict_data(Vector1D(12), Vector1D(8))

    with pytest.raises(TransferError):
        transfer.interpolate_data(Vector1D(4), Vector1D(16))


@pytest.mark.base
def test_non_cube_shapes():
    from pyPFASST.core.errors import NonCubeShapeError, TransferError
    from pyPFASST.implementations.datatype_classes.vector import Cube2D, Cube3D, Vector1D
    from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

    transfer = SpectralTransfer()

    with pytest.raises(NonCubeShapeError):
        transfer.interpolate_data(Cube2D(8), Cube2D(32))
    with pytest.raises(NonCubeShapeError):
        transfer.restrict_data(Cube3D(50), Cube3D(8))
    with pytest.raises(TransferError):
        transfer.interpolate_data(Vector1D(4), Cube2D(64))


@pytest.mark.base
def test_generic_transfer_not_implemented():
    from pyPFASST.core.errors import NotImplementedYetError
    from pyPFASST.core.transfer import Transfer

    transfer = Transfer()
    assert transfer.params.coarsening_factor == 2

    for call in [
        lambda: transfer.interpolate_initial(None, None),
        lambda: transfer.interpolate(None, None),
        lambda: transfer.interpolate_data(None, None),
        lambda: transfer.restrict_initial(None, None),
        lambda: transfer.restrict(None, None, initial=True),
        lambda: transfer.restrict_data(None, None),
        lambda: transfer.fas(0.1, None, None),
    ]:
        with pytest.raises(NotImplementedYetError):
            call()
