import numpy as np

from pyPFASST.core.problem import ptype
from pyPFASST.implementations.datatype_classes.vector import Vector1D


# noinspection PyUnusedLocal
class test_equation_imex(ptype):
    r"""
    Scalar test equation with an implicit and an explicit part

    .. math::
        \frac{d u(t)}{dt} = \lambda_I u(t) + \lambda_E u(t) + c

    The term :math:`\lambda_I u` is treated implicitly, :math:`\lambda_E u + c` explicitly.
    """

    def __init__(self, problem_params):
        """
        Initialization routine

        Args:
            problem_params (dict): custom parameters for the example
        """
        problem_params = dict(problem_params)
        if 'lambda_impl' not in problem_params:
            problem_params['lambda_impl'] = -1.0
        if 'lambda_expl' not in problem_params:
            problem_params['lambda_expl'] = -0.5
        if 'c' not in problem_params:
            problem_params['c'] = 0.0
        if 'u0' not in problem_params:
            problem_params['u0'] = 1.0

        super().__init__(problem_params, dtype_u=Vector1D, num_dofs=1)

    def evaluate_rhs_expl(self, t, u):
        return self.dtype_u(self.params.lambda_expl * u.data + self.params.c)

    def evaluate_rhs_impl(self, t, u):
        return self.dtype_u(self.params.lambda_impl * u.data)

    def implicit_solve(self, t, dt, rhs):
        u = self.dtype_u(rhs.data / (1.0 - dt * self.params.lambda_impl))
        return u, self.evaluate_rhs_impl(t, u)

    def u_exact(self, t):
        lam = self.params.lambda_impl + self.params.lambda_expl
        u0 = self.params.u0
        c = self.params.c
        if lam == 0.0:
            value = u0 + c * t
        else:
            value = (u0 + c / lam) * np.exp(lam * t) - c / lam
        return self.dtype_u(np.array([value]))
