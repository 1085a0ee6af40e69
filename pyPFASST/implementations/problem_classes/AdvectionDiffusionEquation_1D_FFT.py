import numpy as np

from pyPFASST.core.errors import ProblemError
from pyPFASST.core.problem import ptype
from pyPFASST.implementations.datatype_classes.vector import Vector1D


# noinspection PyUnusedLocal
class advection_diffusion_fft(ptype):
    r"""
    Example implementing the unforced one-dimensional advection diffusion equation

    .. math::
        \frac{\partial u(x,t)}{\partial t} = - v \frac{\partial u(x,t)}{\partial x} + \nu \frac{\partial^2 u(x,t)}{\partial x^2}

    with periodic boundary conditions in :math:`[0, 1]`, discretized spectrally. The advection part is treated
    explicitly, the diffusion part implicitly. The exact solution is given by

    .. math::
        u(x, t) = \sin(2 \pi (x - v t)) \exp(-4 \pi^2 \nu t)

    Attributes:
        xvalues (numpy.ndarray): grid points in space
        ddx (numpy.ndarray): spectral operator for the gradient
        lap (numpy.ndarray): spectral operator for the Laplacian
    """

    essential_keys = ['num_dofs']

    def __init__(self, problem_params):
        """
        Initialization routine

        Args:
            problem_params (dict): custom parameters for the example
        """
        problem_params = dict(problem_params)
        if 'nu' not in problem_params:
            problem_params['nu'] = 0.02
        if 'v' not in problem_params:
            problem_params['v'] = 1.0

        super().__init__(problem_params, dtype_u=Vector1D, num_dofs=problem_params.get('num_dofs'))

        # we assert that num_dofs looks very particular here.. this will be necessary for coarsening in space later on
        if self.params.num_dofs % 2 != 0:
            raise ProblemError('setup requires num_dofs = 2^p')

        n = self.params.num_dofs
        self.xvalues = np.arange(n) / n

        k = 2.0 * np.pi * np.fft.fftfreq(n, d=1.0 / n)
        self.ddx = 1j * k
        # derivative of the highest mode is not representable on the real grid
        self.ddx[n // 2] = 0.0
        self.lap = -(k**2)

    def evaluate_rhs_expl(self, t, u):
        z = np.fft.fft(u.data)
        return self.dtype_u(np.real(np.fft.ifft(-self.params.v * self.ddx * z)))

    def evaluate_rhs_impl(self, t, u):
        z = np.fft.fft(u.data)
        return self.dtype_u(np.real(np.fft.ifft(self.params.nu * self.lap * z)))

    def implicit_solve(self, t, dt, rhs):
        """
        Simple FFT solver for the diffusion part

        Args:
            t (float): current time
            dt (float): node-to-node stepsize
            rhs (Encapsulation): right-hand side of the linear system

        Returns:
            tuple of Encapsulation: the solution and the implicit right-hand side there
        """
        z = np.fft.fft(rhs.data) / (1.0 - self.params.nu * dt * self.lap)
        u = self.dtype_u(np.real(np.fft.ifft(z)))
        f = self.dtype_u(np.real(np.fft.ifft(self.params.nu * self.lap * z)))
        return u, f

    def u_exact(self, t):
        """
        Routine to compute the exact solution at time t

        Args:
            t (float): current time

        Returns:
            Encapsulation: exact solution
        """
        omega = 2.0 * np.pi
        me = np.sin(omega * (self.xvalues - self.params.v * t)) * np.exp(-t * self.params.nu * omega**2)
        return self.dtype_u(me)
