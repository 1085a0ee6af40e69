import logging

from pyPFASST.core.encapsulation import EncapFactory
from pyPFASST.core.errors import NotImplementedYetError, ParameterError
from pyPFASST.helpers.pfasst_helper import FrozenClass


class WorkCounter(object):
    """
    Utility class for counting evaluations and solves.

    Contains one attribute `niter` initialized to zero during instantiation, which can be incremented by calling the
    object as a function, e.g.

    >>> count = WorkCounter()  # => niter = 0
    >>> count()                # => niter = 1
    >>> count()                # => niter = 2
    """

    def __init__(self):
        self.niter = 0

    def __call__(self, *args, **kwargs):
        self.niter += 1

    def reset(self):
        self.niter = 0


# short helper class to add params as attributes
class _Pars(FrozenClass):
    def __init__(self, params):
        for k, v in params.items():
            setattr(self, k, v)

        self._freeze()


class ptype(object):
    """
    Prototype class for the problems the IMEX sweeper is working on. A problem provides the numerical model of the
    right-hand side split into an explicit and an implicit part, and the solver for the implicit part:

    - evaluate_rhs_expl(t, u)
    - evaluate_rhs_impl(t, u)
    - implicit_solve(t, dt, rhs) solving u - dt * f_impl(t, u) = rhs

    Attributes:
        logger: custom logger for problem-related logging
        params (_Pars): parameter object containing the custom parameters passed by the user
        dtype_u: the type of the state containers
        factory (EncapFactory): factory for zero-initialized containers of the right size
    """

    essential_keys = []

    def __init__(self, problem_params, dtype_u, num_dofs):
        """
        Initialization routine

        Args:
            problem_params (dict): custom parameters for the problem
            dtype_u: state container type
            num_dofs (int): total number of degrees of freedom
        """
        self.logger = logging.getLogger('problem')

        for key in self.essential_keys:
            if key not in problem_params:
                msg = 'need %s to instantiate problem, only got %s' % (key, str(problem_params.keys()))
                self.logger.error(msg)
                raise ParameterError(msg)

        self.params = _Pars(problem_params)
        self.dtype_u = dtype_u
        self.factory = EncapFactory(dtype_u, num_dofs)

    @property
    def num_dofs(self):
        return self.factory.size

    def evaluate_rhs_expl(self, t, u):
        """
        Abstract interface to the explicit part of the right-hand side
        """
        raise NotImplementedYetError('evaluation of explicit part of right-hand-side')

    def evaluate_rhs_impl(self, t, u):
        """
        Abstract interface to the implicit part of the right-hand side
        """
        raise NotImplementedYetError('evaluation of implicit part of right-hand-side')

    def implicit_solve(self, t, dt, rhs):
        """
        Abstract interface to the implicit solve, has to return the new state and the implicit right-hand side there
        """
        raise NotImplementedYetError('spatial solver for implicit part')

    def u_exact(self, t):
        """
        Abstract interface to the exact solution
        """
        raise NotImplementedYetError('exact solution')

    def compute_error(self, t, u):
        """
        Maximum norm of the difference between u and the exact solution at time t

        Args:
            t (float): current time
            u (Encapsulation): current approximation

        Returns:
            float: absolute error
        """
        error = self.u_exact(t)
        error.scaled_add(-1.0, u)
        return error.norm0()

    def generate_scipy_reference_solution(self, t, u_init=None, t_init=None, **kwargs):
        """
        Compute a reference solution using `scipy.solve_ivp` with very small tolerances. The full right-hand side
        (explicit plus implicit part) is integrated on the flat buffer of the state container.

        The keyword arguments will be passed to `scipy.solve_ivp`. You should consider passing `method='BDF'` for stiff
        problems.

        Args:
            t (float): time of the reference solution
            u_init (Encapsulation): initial conditions, defaults to the exact solution at t_init
            t_init (float): the starting time, defaults to 0

        Returns:
            Encapsulation: reference solution
        """
        import numpy as np
        from scipy.integrate import solve_ivp

        t_init = 0.0 if t_init is None else t_init
        u_init = self.u_exact(t=t_init) if u_init is None else u_init

        def eval_rhs(time, u):
            me = self.dtype_u(u)
            return (self.evaluate_rhs_expl(time, me) + self.evaluate_rhs_impl(time, me)).data

        tol = 100 * np.finfo(float).eps
        sol = solve_ivp(eval_rhs, (t_init, t), u_init.data.copy(), rtol=tol, atol=tol, **kwargs)
        return self.dtype_u(sol.y[:, -1])
