from argparse import ArgumentParser

from mpi4py import MPI

from pyPFASST.implementations.communicators.mpi_p2p import MpiP2P
from pyPFASST.implementations.controller_classes.pfasst import PFASST
from pyPFASST.implementations.controller_classes.sdc import SDC
from pyPFASST.implementations.problem_classes.HeatEquation_ND_FFT import heat_fft
from pyPFASST.implementations.sweeper_classes.imex import imex
from pyPFASST.implementations.transfer_classes.spectral import SpectralTransfer

# (num_dofs, num_nodes) from the finest to the coarsest level
LEVELS = [(32, 5), (16, 3), (8, 2)]


def get_sweeper(num_dofs, num_nodes, abs_residual_tol):
    problem = heat_fft({'num_dofs': num_dofs, 'nu': 0.1})
    sweeper = imex({'num_nodes': num_nodes, 'abs_residual_tol': abs_residual_tol}, problem)
    return sweeper, problem


def run_pfasst(nlevels, nsteps, niters, abs_residual_tol, dt=0.05):
    """
    Run PFASST on all ranks of COMM_WORLD

    Returns:
        tuple: end state, the number of iterations of the last block and the problem on the finest level
    """
    controller = PFASST(MpiP2P(MPI.COMM_WORLD), {'logger_level': 40})
    controller.set_duration(dt=dt, nsteps=nsteps, niters=niters)

    problem = None
    for i, (num_dofs, num_nodes) in enumerate(LEVELS[:nlevels]):
        sweeper, level_problem = get_sweeper(num_dofs, num_nodes, abs_residual_tol)
        problem = level_problem if problem is None else problem
        controller.add_level(sweeper, SpectralTransfer() if i < nlevels - 1 else None)
    controller.setup()

    uend = controller.run(problem.u_exact(0.0))
    return uend, controller.finest().current().status.iteration, problem


def run_sdc(nsteps, abs_residual_tol, dt=0.05):
    """
    Serial SDC on the finest level as reference, run redundantly on each rank
    """
    sweeper, problem = get_sweeper(*LEVELS[0], abs_residual_tol)

    controller = SDC({'logger_level': 40})
    controller.set_duration(dt=dt, nsteps=nsteps, niters=100)
    controller.add_level(sweeper)
    controller.setup()

    return controller.run(problem.u_exact(0.0))


def main(nlevels, niters, abs_residual_tol):
    comm = MPI.COMM_WORLD
    # two blocks of time steps
    nsteps = 2 * comm.Get_size()

    u_pfasst, iterations, _ = run_pfasst(nlevels, nsteps, niters, abs_residual_tol)
    u_sdc = run_sdc(nsteps, abs_residual_tol=1e-13)

    diff = abs(u_pfasst - u_sdc)
    print(f'rank {comm.Get_rank()}: levels {nlevels}, iterations {iterations}, difference {diff:.6e}', flush=True)


if __name__ == "__main__":
    parser = ArgumentParser()
    parser.add_argument("-l", "--nlevels", help='Number of levels of the PFASST hierarchy', type=int, default=2)
    parser.add_argument("-i", "--niters", help='Maximum number of iterations per block', type=int, default=40)
    parser.add_argument("-t", "--tol", help='Absolute residual tolerance', type=float, default=1e-12)
    args = parser.parse_args()

    main(nlevels=args.nlevels, niters=args.niters, abs_residual_tol=args.tol)
