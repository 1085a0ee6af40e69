import numpy as np

from pyPFASST.core.errors import ProblemError
from pyPFASST.core.problem import ptype
from pyPFASST.implementations.datatype_classes.vector import get_vector_class


# noinspection PyUnusedLocal
class heat_fft(ptype):
    r"""
    Example implementing the unforced heat equation

    .. math::
        \frac{\partial u}{\partial t} = \nu \Delta u

    on the unit cube in one, two or three dimensions with periodic boundary conditions, discretized spectrally with
    `num_dofs` points per dimension. The diffusion is treated implicitly, there is no explicit part. The exact solution
    is

    .. math::
        u(x, t) = \sum_d \sin(2 \pi x_d) \exp(-4 \pi^2 \nu t)

    Attributes:
        xvalues (list of numpy.ndarray): grid coordinates along each axis, shaped for broadcasting
        lap (numpy.ndarray): spectral operator for the Laplacian
    """

    essential_keys = ['num_dofs']

    def __init__(self, problem_params):
        """
        Initialization routine

        Args:
            problem_params (dict): custom parameters for the example, `num_dofs` is the number of points per dimension
        """
        problem_params = dict(problem_params)
        if 'nu' not in problem_params:
            problem_params['nu'] = 0.02
        if 'dim' not in problem_params:
            problem_params['dim'] = 1

        dim = problem_params['dim']
        super().__init__(problem_params, dtype_u=get_vector_class(dim), num_dofs=None)

        n = self.params.num_dofs
        if n % 2 != 0:
            raise ProblemError(f'the setup requires an even number of points per dimension, got {n}')
        self.factory.set_size(n**dim)
        shape = (n,) * dim

        x = np.arange(n) / n
        self.xvalues = np.meshgrid(*([x] * dim), indexing='ij')

        k = 2.0 * np.pi * np.fft.fftfreq(n, d=1.0 / n)
        kgrid = np.meshgrid(*([k] * dim), indexing='ij')
        self.lap = np.zeros(shape)
        for kd in kgrid:
            self.lap -= kd**2

    def evaluate_rhs_expl(self, t, u):
        return self.dtype_u(self.num_dofs, val=0.0)

    def evaluate_rhs_impl(self, t, u):
        z = np.fft.fftn(u.as_grid())
        return self.dtype_u(np.real(np.fft.ifftn(self.params.nu * self.lap * z)))

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
        z = np.fft.fftn(rhs.as_grid()) / (1.0 - self.params.nu * dt * self.lap)
        u = self.dtype_u(np.real(np.fft.ifftn(z)))
        f = self.dtype_u(np.real(np.fft.ifftn(self.params.nu * self.lap * z)))
        return u, f

    def u_exact(self, t):
        """
        Routine to compute the exact solution at time t

        Args:
            t (float): current time

        Returns:
            Encapsulation: exact solution
        """
        me = np.zeros((self.params.num_dofs,) * self.params.dim)
        for xd in self.xvalues:
            me += np.sin(2.0 * np.pi * xd)
        me *= np.exp(-4.0 * np.pi**2 * self.params.nu * t)
        return self.dtype_u(me)
