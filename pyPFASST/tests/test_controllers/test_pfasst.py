import pytest
import numpy as np


class SingleRank(object):
    size = 1
    rank = 0
    is_first = True
    is_last = True


def get_pfasst(levels=((32, 5), (16, 3), (8, 2))):
    from pyPFASST.implementations.controller_classes.pfasst import PFASST
    from pyPFASST.implementations.problem_classes.HeatEquation_ND_FFT import heat_fft
    from pyPFASST.implementations.sweeper_classes.imex import imex
    from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

    controller = PFASST(SingleRank(), {'logger_level': 30})
    controller.set_duration(dt=0.1, nsteps=1, niters=5)

    problems = []
    for i, (num_dofs, num_nodes) in enumerate(levels):
        problem = heat_fft({'num_dofs': num_dofs})
        problems.append(problem)
        controller.add_level(imex({'num_nodes': num_nodes}, problem), SpectralTransfer() if i < len(levels) - 1 else None)
    controller.setup()
    controller.set_step(0, 0.0)
    return controller, problems


@pytest.mark.base
def test_update_initial_values_reaches_intermediate_levels():
    controller, problems = get_pfasst()
    coarse, medium, fine = controller.levels

    fine.initial_state.copy_from(problems[0].u_exact(0.1))
    controller.update_initial_values()

    assert np.allclose(medium.initial_state.as_grid(), fine.initial_state.as_grid()[::2])
    expected_rhs = problems[1].evaluate_rhs_impl(0.0, medium.initial_state)
    assert np.allclose(medium._impl_rhs[0], expected_rhs), 'right-hand side at the initial value has to be updated'

    assert np.allclose(coarse.initial_state, 0.0), 'the coarsest level receives its initial value from the neighbor'


@pytest.mark.base
def test_update_initial_values_with_two_levels():
    controller, problems = get_pfasst(levels=((16, 3), (8, 2)))
    coarse, fine = controller.levels

    fine.initial_state.copy_from(problems[0].u_exact(0.1))
    controller.update_initial_values()

    assert np.allclose(coarse.initial_state, 0.0)
