import pytest
import numpy as np


@pytest.mark.base
@pytest.mark.parametrize('dim', [1, 2, 3])
def test_forward_backward_unnormalized(dim):
    from pyPFASST.helpers.fft_helper import FFT
    from pyPFASST.implementations.datatype_classes.vector import get_vector_class

    n = 8
    encap_class = get_vector_class(dim)
    rng = np.random.default_rng(seed=dim)
    x = encap_class(rng.random(n**dim))
    y = encap_class(n**dim)

    fft = FFT()
    z = fft.forward(x)
    assert z.shape == (n,) * dim
    assert np.isclose(z.flat[0], np.sum(x.data)), 'forward transform should not be normalized'

    fft.backward(z, y)
    assert np.allclose(y.data, n**dim * x.data), 'backward transform should not be normalized'


@pytest.mark.base
def test_workspaces_are_cached():
    from pyPFASST.helpers.fft_helper import FFT

    fft = FFT()
    ws = fft.get_workspace((4, 4))
    assert fft.get_workspace([4, 4]) is ws
    assert fft.get_workspace((8, 8)) is not ws
    assert len(fft.workspaces) == 2
