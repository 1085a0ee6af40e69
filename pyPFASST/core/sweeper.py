import logging

from pyPFASST.core.collocation import CollBase
from pyPFASST.core.errors import NotImplementedYetError, SetupError, UnsupportedQuadratureError
from pyPFASST.helpers.pfasst_helper import FrozenClass


# short helper class to add params as attributes
class _Pars(FrozenClass):
    def __init__(self, pars):
        self.abs_residual_tol = 0.0
        self.rel_residual_tol = 0.0

        for k, v in pars.items():
            if k != 'collocation_class':
                setattr(self, k, v)

        self._freeze()


class Sweeper(object):
    """
    Base abstract sweeper class, working on one level of the hierarchy

    A sweeper owns all the per-node data of its level, i.e. the states at the quadrature nodes (the first one being the
    initial value), the states of the previous iteration, the end state, the FAS corrections and the residuals. Its
    lifecycle for one time step is

        setup -> (pre_)predict -> post_predict -> [(pre_)sweep -> post_sweep -> converged]* -> post_step -> advance

    The generic sweeper only provides the bookkeeping and the convergence check. Specializations have to supply
    `reevaluate`, `integrate`, `compute_residuals` and `advance`.

    Attributes:
        logger: custom logger for sweeper-related logging
        params (_Pars): parameter object containing the custom parameters passed by the user
        quadrature (CollBase): quadrature table, has to be attached before setup
        status (Status): status of the level, has to be attached before setup
        encap_factory (EncapFactory): factory creating the containers for the node data
    """

    def __init__(self, params, encap_factory=None):
        """
        Initialization routine for the base sweeper

        Args:
            params (dict): parameter object, a quadrature is created if `num_nodes` is given
            encap_factory (EncapFactory): factory for the node data
        """

        # set up logger
        self.logger = logging.getLogger('sweeper')

        # work on a copy, the caller may reuse the dict for other levels
        params = dict(params)
        if 'num_nodes' in params and 'collocation_class' not in params:
            params['collocation_class'] = CollBase

        self.params = _Pars(params)

        if 'num_nodes' in params:
            self.quadrature = params['collocation_class'](**params)
        else:
            self.quadrature = None

        self.status = None
        self.encap_factory = encap_factory

        self.states = []
        self.previous_states = []
        self.end_state = None
        self.tau = []
        self.residuals = []

    def setup(self):
        """
        Allocates the node data, one container per quadrature node plus one for the initial value

        Raises:
            SetupError: if status or quadrature have not been attached yet
        """
        if self.status is None:
            msg = 'Status not yet set.'
            self.logger.error(msg)
            raise SetupError(msg)
        self.logger.debug(
            f'setting up with t0={self.status.time}, dt={self.status.dt}, t_end={self.status.t_end}, '
            f'max_iter={self.status.max_iterations}'
        )

        if self.quadrature is None:
            msg = 'Quadrature not yet set.'
            self.logger.error(msg)
            raise SetupError(msg)
        self.logger.info(
            f'using as quadrature: {self.quadrature.print_summary()} and an expected error of '
            f'{self.quadrature.expected_error():.6e}'
        )

        if self.encap_factory is None:
            msg = 'Encapsulation factory not yet set.'
            self.logger.error(msg)
            raise SetupError(msg)

        num_nodes = self.quadrature.get_num_nodes()
        factory = self.encap_factory

        self.states = [factory.create() for _ in range(num_nodes + 1)]
        self.previous_states = [factory.create() for _ in range(num_nodes + 1)]
        self.end_state = factory.create()
        self.tau = [factory.create() for _ in range(num_nodes + 1)]
        self.residuals = [factory.create() for _ in range(num_nodes + 1)]

    @property
    def initial_state(self):
        """
        Returns:
            Encapsulation: the state at the left interval boundary, i.e. the first entry of the node states
        """
        if len(self.states) == 0:
            raise SetupError('Sweeper need to be setup first before querying initial state.')
        return self.states[0]

    def pre_predict(self):
        self.logger.debug('pre-predicting')

    def predict(self):
        """
        Predictor to fill values at nodes before first sweep, nothing to do for the generic sweeper
        """
        self.logger.debug('predicting')

    def post_predict(self):
        self.logger.debug('post-predicting')
        self.integrate_end_state(self.status.dt)

    def pre_sweep(self):
        self.logger.debug('pre-sweeping')

    def sweep(self):
        """
        Update the values at the nodes, nothing to do for the generic sweeper
        """
        self.logger.debug('sweeping')

    def post_sweep(self):
        self.logger.debug('post-sweeping')
        self.integrate_end_state(self.status.dt)

    def post_step(self):
        self.logger.debug('post step')

    def advance(self, num_steps=1):
        """
        Prepare the sweeper for the next time step(s), nothing to do for the generic sweeper

        Args:
            num_steps (int): number of time steps to advance
        """
        self.logger.debug(f'advancing {num_steps} time steps')

    def spread(self):
        """
        Copy the initial value to all other nodes
        """
        self.logger.debug('spreading initial value to all states')
        for m in range(1, len(self.states)):
            self.states[m].copy_from(self.initial_state)

    def save(self):
        """
        Store the current node values as values of the previous iteration
        """
        self.logger.debug('saving states to previous states')
        if len(self.states) == 0:
            msg = 'Sweeper need to be setup first before saving states.'
            self.logger.error(msg)
            raise SetupError(msg)

        for m in range(len(self.states)):
            self.previous_states[m].copy_from(self.states[m])

    def reevaluate(self, initial_only=False):
        """
        Abstract interface to the re-evaluation of the right-hand side at the nodes
        """
        raise NotImplementedYetError('reevaluation of right-hand-side')

    def integrate(self, dt):
        """
        Abstract interface to the integration from the left interval boundary to each node
        """
        raise NotImplementedYetError('integration over dt')

    def compute_residuals(self, only_last=False):
        """
        Abstract interface to the residual computation
        """
        raise NotImplementedYetError('computation of residuals')

    def integrate_end_state(self, dt):
        """
        Compute the solution at the right interval boundary

        Args:
            dt (float): size of the time step

        Raises:
            UnsupportedQuadratureError: if the right interval boundary is not a quadrature node
        """
        if not self.quadrature.right_is_node:
            msg = 'integration of end state for quadratures without right end point as node'
            self.logger.error(msg)
            raise UnsupportedQuadratureError(msg)

        self.end_state.copy_from(self.states[-1])

    def converged(self, pre_check=False):
        """
        Convergence check based on the residuals at the nodes

        With `pre_check` only the residual at the last node is computed and checked. Otherwise, the norms of all
        residuals are computed and their maxima are stored in the status. In both cases the absolute tolerance is checked
        first and either one is sufficient. If no tolerance is set, the check is skipped and False is returned.

        Args:
            pre_check (bool): only check the last node

        Returns:
            bool: whether one of the residual tolerances is met
        """
        self.compute_residuals(only_last=pre_check)

        num_residuals = len(self.residuals)
        abs_norms = [0.0] * num_residuals
        rel_norms = [0.0] * num_residuals

        abs_norms[-1] = self.residuals[-1].norm0()
        rel_norms[-1] = self._relative_norm(abs_norms[-1], self.states[-1])

        abs_tol = self.params.abs_residual_tol
        rel_tol = self.params.rel_residual_tol

        if pre_check:
            if abs_tol > 0.0 or rel_tol > 0.0:
                self.logger.debug('preliminary convergence check')
                return self._check_tolerances(abs_norms[-1], rel_norms[-1])
            else:
                self.logger.warning('No residual tolerances set. Thus skipping convergence check.')
                return False

        for m in range(num_residuals - 1):
            abs_norms[m] = self.residuals[m].norm0()
            rel_norms[m] = self._relative_norm(abs_norms[m], self.states[m])

        self.status.abs_res_norms = abs_norms
        self.status.rel_res_norms = rel_norms
        self.status.abs_res_norm = max(abs_norms)
        self.status.rel_res_norm = max(rel_norms)

        for m in range(num_residuals):
            self.logger.debug(f'  node {m}: abs residual {abs_norms[m]:.6e}, rel residual {rel_norms[m]:.6e}')
        self.logger.info(
            f'iteration {self.status.iteration}, last node: abs residual {abs_norms[-1]:.6e}, '
            f'rel residual {rel_norms[-1]:.6e}'
        )

        if abs_tol > 0.0 or rel_tol > 0.0:
            self.logger.debug('convergence check')
            self.status.converged = self._check_tolerances(self.status.abs_res_norm, self.status.rel_res_norm)
            return self.status.converged
        else:
            self.logger.warning('No residual tolerances set. Thus skipping convergence check.')
            return False

    @staticmethod
    def _relative_norm(abs_norm, state):
        state_norm = state.norm0()
        return abs_norm / state_norm if state_norm > 0.0 else abs_norm

    def _check_tolerances(self, abs_norm, rel_norm):
        if abs_norm < self.params.abs_residual_tol:
            self.logger.debug(
                f'Sweeper has converged w.r.t. absolute residual tolerance: '
                f'{abs_norm:.6e} < {self.params.abs_residual_tol:.6e}'
            )
        elif rel_norm < self.params.rel_residual_tol:
            self.logger.debug(
                f'Sweeper has converged w.r.t. relative residual tolerance: '
                f'{rel_norm:.6e} < {self.params.rel_residual_tol:.6e}'
            )
        else:
            self.logger.debug('Sweeper has not yet converged to neither residual tolerance.')

        return abs_norm < self.params.abs_residual_tol or rel_norm < self.params.rel_residual_tol
