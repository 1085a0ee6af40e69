import pytest
import numpy as np


def get_sweepers(fine_nodes=5, coarse_nodes=3, quad_type='RADAU-RIGHT'):
    """
    Fine and coarse IMEX sweepers for the scalar test equation, sharing the initial value
    """
    from pyPFASST.core.status import Status
    from pyPFASST.implementations.problem_classes.TestEquation_IMEX import test_equation_imex
    from pyPFASST.implementations.sweeper_classes.imex import imex

    problem_params = {'lambda_impl': -1.0, 'lambda_expl': -0.5, 'u0': 1.0}

    sweepers = []
    for num_nodes in [fine_nodes, coarse_nodes]:
        problem = test_equation_imex(dict(problem_params))
        sweeper = imex({'num_nodes': num_nodes, 'node_type': 'LEGENDRE', 'quad_type': quad_type}, problem)
        sweeper.status = Status(time=0.0, dt=0.2, t_end=0.2, num_steps=1, max_iterations=20)
        sweeper.setup()
        sweeper.initial_state.copy_from(problem.u_exact(0.0))
        sweeper.spread()
        sweeper.predict()
        sweeper.post_predict()
        sweepers.append(sweeper)

    return sweepers


@pytest.mark.base
@pytest.mark.parametrize('num_coarse', [2, 3, 4])
def test_lagrange_matrices(num_coarse):
    from pyPFASST.core.collocation import CollBase
    from pyPFASST.implementations.transfer_classes.polynomial import PolynomialTransfer

    f_nodes = CollBase(7, quad_type='LOBATTO').get_nodes()
    c_nodes = CollBase(num_coarse, quad_type='RADAU-RIGHT').get_nodes()

    tmat = PolynomialTransfer.get_transfer_matrix_Q(f_nodes, c_nodes)
    assert tmat.shape == (len(f_nodes), len(c_nodes))
    assert np.allclose(np.sum(tmat, axis=1), 1.0), 'interpolation has to reproduce constants'

    # polynomials of degree below the number of coarse nodes are interpolated exactly
    poly_coeff = np.random.rand(num_coarse)
    assert np.allclose(tmat.dot(np.polyval(poly_coeff, c_nodes)), np.polyval(poly_coeff, f_nodes))


@pytest.mark.base
def test_time_matrices_are_cached():
    from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

    fine, coarse = get_sweepers()
    transfer = SpectralTransfer()

    Pcoll, Rcoll = transfer.get_time_matrices(fine, coarse)
    assert Pcoll.shape == (5, 3)
    assert Rcoll.shape == (3, 5)
    assert transfer.get_time_matrices(fine, coarse)[0] is Pcoll

    same, _ = get_sweepers(fine_nodes=3, coarse_nodes=3)
    Pcoll, Rcoll = transfer.get_time_matrices(same, coarse)
    assert np.array_equal(Pcoll, np.eye(3))
    assert np.array_equal(Rcoll, np.eye(3))


@pytest.mark.base
def test_restrict_with_equal_nodes():
    from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

    fine, coarse = get_sweepers(fine_nodes=3, coarse_nodes=3)
    for _ in range(3):
        fine.save()
        fine.sweep()
    fine.initial_state.data[:] = 2.0

    SpectralTransfer().restrict(fine, coarse, initial=True)
    for m in range(len(fine.states)):
        assert np.allclose(coarse.states[m], fine.states[m])
    assert np.allclose(coarse._impl_rhs[-1], fine.problem.evaluate_rhs_impl(0.2, fine.states[-1]))


@pytest.mark.base
def test_fas_correction():
    from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

    fine, coarse = get_sweepers()
    for _ in range(20):
        fine.save()
        fine.sweep()

    transfer = SpectralTransfer()
    transfer.restrict(fine, coarse, initial=True)
    coarse.tau[0].data[:] = 1.0
    transfer.fas(coarse.status.dt, fine, coarse)

    assert coarse.tau[0].norm0() == 0.0, 'FAS correction is measured from the left boundary'
    assert any(tau.norm0() > 0.0 for tau in coarse.tau[1:])

    # restricted converged fine solution solves the corrected coarse problem
    coarse.compute_residuals()
    for res in coarse.residuals:
        assert res.norm0() < 1e-12


@pytest.mark.base
def test_interpolate_correction():
    from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

    fine, coarse = get_sweepers()
    transfer = SpectralTransfer()

    before = [u.copy() for u in fine.states]
    coarse.save()
    transfer.interpolate(coarse, fine)
    for m in range(len(fine.states)):
        assert np.allclose(fine.states[m], before[m]), 'zero correction must not change the fine values'

    # a constant correction is carried over to all fine nodes
    for u in coarse.states[1:]:
        u.data[:] += 0.5
    transfer.interpolate(coarse, fine)
    for m in range(1, len(fine.states)):
        assert np.allclose(fine.states[m], before[m] + 0.5)
    assert np.allclose(fine._expl_rhs[-1], fine.problem.evaluate_rhs_expl(0.2, fine.states[-1]))


@pytest.mark.base
def test_interpolate_initial_value():
    from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

    fine, coarse = get_sweepers()
    coarse.initial_state.data[:] = 3.0
    coarse.save()

    SpectralTransfer().interpolate(coarse, fine, initial=True)
    assert np.allclose(fine.initial_state, 3.0)
    assert np.allclose(fine._impl_rhs[0], -3.0)
