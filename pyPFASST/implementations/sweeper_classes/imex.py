import numpy as np

from pyPFASST.core.errors import NotImplementedYetError
from pyPFASST.core.problem import WorkCounter
from pyPFASST.core.sweeper import Sweeper


class imex(Sweeper):
    """
    IMEX sweeper using explicit Euler for the explicit part and implicit Euler for the implicit part of the right-hand
    side as base integrator

    The numerical model is provided by the problem object, i.e. `evaluate_rhs_expl`, `evaluate_rhs_impl` and
    `implicit_solve` are delegated to it.

    Attributes:
        problem: the problem class providing the right-hand side and the implicit solver
        work_counters (dict): number of explicit evaluations, implicit evaluations and implicit solves
    """

    def __init__(self, params, problem):
        """
        Initialization routine for the IMEX sweeper

        Args:
            params (dict): parameter object
            problem (ptype): problem instance
        """
        super().__init__(params, encap_factory=problem.factory)

        self.problem = problem

        self._expl_rhs = []
        self._impl_rhs = []
        self._q_integrals = []

        self.work_counters = {'expl': WorkCounter(), 'impl': WorkCounter(), 'solves': WorkCounter()}

    def setup(self):
        super().setup()

        num_nodes = self.quadrature.get_num_nodes()
        factory = self.encap_factory

        self._expl_rhs = [factory.create() for _ in range(num_nodes + 1)]
        self._impl_rhs = [factory.create() for _ in range(num_nodes + 1)]
        self._q_integrals = [factory.create() for _ in range(num_nodes + 1)]

    @property
    def nodes(self):
        """
        Returns:
            numpy.ndarray: quadrature nodes prepended by the left interval boundary
        """
        return np.concatenate([[self.quadrature.tleft], self.quadrature.get_nodes()])

    def _node_time(self, m):
        return self.status.time + self.status.dt * (self.nodes[m] - self.quadrature.tleft)

    def evaluate_rhs_expl(self, m):
        """
        Evaluate the explicit part of the right-hand side at node m
        """
        self._expl_rhs[m].copy_from(self.problem.evaluate_rhs_expl(self._node_time(m), self.states[m]))
        self.work_counters['expl']()

    def evaluate_rhs_impl(self, m):
        """
        Evaluate the implicit part of the right-hand side at node m
        """
        self._impl_rhs[m].copy_from(self.problem.evaluate_rhs_impl(self._node_time(m), self.states[m]))
        self.work_counters['impl']()

    def implicit_solve(self, m, ds, rhs):
        """
        Solve u - ds * f_impl(u) = rhs for the state at node m and store the implicit right-hand side there

        Args:
            m (int): index of the node
            ds (float): distance to the previous node
            rhs (Encapsulation): right-hand side of the linear system
        """
        u, f_impl = self.problem.implicit_solve(self._node_time(m), ds, rhs)
        self.states[m].copy_from(u)
        self._impl_rhs[m].copy_from(f_impl)
        self.work_counters['solves']()

    def predict(self):
        """
        Predictor using one IMEX Euler step from node to node
        """
        self.logger.debug('predicting')

        dt = self.status.dt
        nodes = self.nodes

        self.reevaluate(initial_only=True)

        for m in range(self.quadrature.get_num_nodes()):
            ds = dt * (nodes[m + 1] - nodes[m])
            rhs = self.states[m].copy()
            rhs.scaled_add(ds, self._expl_rhs[m])

            self.implicit_solve(m + 1, ds, rhs)
            self.evaluate_rhs_expl(m + 1)

    def sweep(self):
        """
        Update the values at the nodes with one IMEX SDC sweep
        """
        self.logger.debug('sweeping')

        dt = self.status.dt
        nodes = self.nodes
        num_nodes = self.quadrature.get_num_nodes()
        S = self.quadrature.Smat

        # node-to-node integrals of the old iterate, including the FAS correction
        for m in range(num_nodes):
            ds = dt * (nodes[m + 1] - nodes[m])
            q = self._q_integrals[m + 1]
            q.zero()
            for j in range(1, num_nodes + 1):
                q.scaled_add(dt * S[m + 1, j], self._expl_rhs[j])
                q.scaled_add(dt * S[m + 1, j], self._impl_rhs[j])
            q.scaled_add(-ds, self._expl_rhs[m])
            q.scaled_add(-ds, self._impl_rhs[m + 1])
            q.scaled_add(1.0, self.tau[m + 1])
            q.scaled_add(-1.0, self.tau[m])

        for m in range(num_nodes):
            ds = dt * (nodes[m + 1] - nodes[m])
            rhs = self.states[m].copy()
            rhs.scaled_add(ds, self._expl_rhs[m])
            rhs.scaled_add(1.0, self._q_integrals[m + 1])

            self.implicit_solve(m + 1, ds, rhs)
            self.evaluate_rhs_expl(m + 1)

    def reevaluate(self, initial_only=False):
        """
        Re-evaluate both parts of the right-hand side

        Args:
            initial_only (bool): only evaluate at the left interval boundary
        """
        if initial_only:
            self.evaluate_rhs_expl(0)
            self.evaluate_rhs_impl(0)
        else:
            for m in range(self.quadrature.get_num_nodes() + 1):
                self.evaluate_rhs_expl(m)
                self.evaluate_rhs_impl(m)

    def advance(self, num_steps=1):
        """
        Use the end state as initial value of the next time step

        Args:
            num_steps (int): number of time steps to advance, only single steps are possible
        """
        if num_steps != 1:
            raise NotImplementedYetError('advancing more than one time step at once')
        self.logger.debug(f'advancing {num_steps} time steps')

        self.states[0].copy_from(self.end_state)
        self._expl_rhs[0].copy_from(self._expl_rhs[-1])
        self._impl_rhs[0].copy_from(self._impl_rhs[-1])
        for tau in self.tau:
            tau.zero()

    def _integrate_node(self, m, dt):
        Q = self.quadrature.Qmat
        integral = self.encap_factory.create()
        for j in range(1, self.quadrature.get_num_nodes() + 1):
            integral.scaled_add(dt * Q[m, j], self._expl_rhs[j])
            integral.scaled_add(dt * Q[m, j], self._impl_rhs[j])
        return integral

    def integrate(self, dt):
        """
        Integrates the right-hand side from the left interval boundary to each node

        Args:
            dt (float): size of the time step

        Returns:
            list of Encapsulation: containing the integral as values, the first one being zero
        """
        return [self._integrate_node(m, dt) for m in range(self.quadrature.get_num_nodes() + 1)]

    def compute_residuals(self, only_last=False):
        """
        Computation of the residual at the nodes, i.e. the defect of the collocation problem including the FAS
        correction

        Args:
            only_last (bool): only compute the residual at the last node
        """
        dt = self.status.dt
        num_nodes = self.quadrature.get_num_nodes()

        indices = [num_nodes] if only_last else range(num_nodes + 1)
        for m in indices:
            res = self.residuals[m]
            res.copy_from(self.states[0])
            res.scaled_add(1.0, self._integrate_node(m, dt))
            res.scaled_add(1.0, self.tau[m])
            res.scaled_add(-1.0, self.states[m])

    def post_step(self):
        super().post_step()
        self.logger.info(
            f'number of explicit evaluations: {self.work_counters["expl"].niter}, '
            f'implicit evaluations: {self.work_counters["impl"].niter}, '
            f'implicit solves: {self.work_counters["solves"].niter}'
        )
        for counter in self.work_counters.values():
            counter.reset()
