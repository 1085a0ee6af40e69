import numpy as np

from pyPFASST.core.transfer import Transfer


class PolynomialTransfer(Transfer):
    """
    Transfer between two levels with (possibly) different quadrature nodes in time

    The temporal transfer uses Lagrange interpolation between the coarse and the fine nodes, the spatial transfer of
    single encapsulations is left to `interpolate_data` and `restrict_data`.
    """

    def __init__(self, params=None):
        super().__init__(params)
        self._time_matrices = {}

    @staticmethod
    def get_transfer_matrix_Q(f_nodes, c_nodes):
        """
        Helper routine to quickly define transfer matrices between sets of nodes (fully Lagrangian)

        Args:
            f_nodes: nodes to evaluate the interpolating polynomial at
            c_nodes: nodes of the interpolating polynomial

        Returns:
            matrix containing the interpolation weights
        """
        nnodes_f = len(f_nodes)
        nnodes_c = len(c_nodes)

        tmat = np.zeros((nnodes_f, nnodes_c))

        for i in range(nnodes_f):
            xi = f_nodes[i]
            for j in range(nnodes_c):
                den = 1.0
                num = 1.0
                for k in range(nnodes_c):
                    if k == j:
                        continue
                    den *= c_nodes[j] - c_nodes[k]
                    num *= xi - c_nodes[k]
                tmat[i, j] = num / den

        return tmat

    def get_time_matrices(self, fine, coarse):
        """
        Interpolation and restriction matrices between the nodes of the two sweepers

        Args:
            fine (Sweeper): fine sweeper
            coarse (Sweeper): coarse sweeper

        Returns:
            tuple of numpy.ndarray: interpolation matrix (fine x coarse) and restriction matrix (coarse x fine)
        """
        fine_nodes = fine.quadrature.get_nodes()
        coarse_nodes = coarse.quadrature.get_nodes()
        key = (tuple(fine_nodes), tuple(coarse_nodes))

        if key not in self._time_matrices:
            if len(fine_nodes) == len(coarse_nodes) and np.allclose(fine_nodes, coarse_nodes):
                Pcoll = np.eye(len(fine_nodes))
                Rcoll = np.eye(len(fine_nodes))
            else:
                Pcoll = self.get_transfer_matrix_Q(fine_nodes, coarse_nodes)
                Rcoll = self.get_transfer_matrix_Q(coarse_nodes, fine_nodes)
            self._time_matrices[key] = (Pcoll, Rcoll)

        return self._time_matrices[key]

    def interpolate_initial(self, coarse, fine):
        """
        Correct the fine initial value by the interpolated coarse correction
        """
        self.logger.debug('interpolating initial value only')

        restricted = coarse.encap_factory.create()
        self.restrict_data(fine.initial_state, restricted)
        coarse_delta = coarse.initial_state.copy()
        coarse_delta.scaled_add(-1.0, restricted)

        fine_delta = fine.encap_factory.create()
        self.interpolate_data(coarse_delta, fine_delta)
        fine.initial_state.scaled_add(1.0, fine_delta)

        fine.reevaluate(initial_only=True)

    def interpolate(self, coarse, fine, initial=False):
        """
        Space-time interpolation of the coarse corrections to the fine nodes

        Args:
            coarse (Sweeper): coarse sweeper
            fine (Sweeper): fine sweeper
            initial (bool): correct the initial value as well
        """
        if initial:
            self.interpolate_initial(coarse, fine)

        self.logger.debug('interpolating')

        Pcoll, _ = self.get_time_matrices(fine, coarse)
        num_coarse_nodes = coarse.quadrature.get_num_nodes()
        num_fine_nodes = fine.quadrature.get_num_nodes()

        # coarse correction, interpolated in space
        fine_deltas = []
        for m in range(1, num_coarse_nodes + 1):
            coarse_delta = coarse.states[m].copy()
            coarse_delta.scaled_add(-1.0, coarse.previous_states[m])
            fine_delta = fine.encap_factory.create()
            self.interpolate_data(coarse_delta, fine_delta)
            fine_deltas.append(fine_delta)

        # interpolate in time
        for n in range(1, num_fine_nodes + 1):
            for m in range(num_coarse_nodes):
                fine.states[n].scaled_add(Pcoll[n - 1, m], fine_deltas[m])

        fine.reevaluate()

    def restrict_initial(self, fine, coarse):
        self.logger.debug('restricting initial value only')
        self.restrict_data(fine.initial_state, coarse.initial_state)

    def restrict(self, fine, coarse, initial=False):
        """
        Space-time restriction of the fine node values

        Args:
            fine (Sweeper): fine sweeper
            coarse (Sweeper): coarse sweeper
            initial (bool): restrict the initial value as well
        """
        if initial:
            self.restrict_initial(fine, coarse)

        self.logger.debug('restricting')

        coarse_states = self._restrict_nodes(fine, coarse, fine.states[1:])
        for n in range(1, coarse.quadrature.get_num_nodes() + 1):
            coarse.states[n].copy_from(coarse_states[n - 1])

        coarse.reevaluate()

    def fas(self, dt, fine, coarse):
        """
        Compute the FAS correction for the coarse level, i.e. the restricted fine integral (including the fine FAS
        correction) minus the coarse integral, both measured from the left interval boundary

        Args:
            dt (float): size of the time step
            fine (Sweeper): fine sweeper
            coarse (Sweeper): coarse sweeper
        """
        self.logger.debug('computing FAS correction')

        fine_integral = fine.integrate(dt)
        coarse_integral = coarse.integrate(dt)

        for m in range(1, len(fine_integral)):
            fine_integral[m].scaled_add(1.0, fine.tau[m])

        restricted = self._restrict_nodes(fine, coarse, fine_integral[1:])

        coarse.tau[0].zero()
        for n in range(1, coarse.quadrature.get_num_nodes() + 1):
            coarse.tau[n].copy_from(restricted[n - 1])
            coarse.tau[n].scaled_add(-1.0, coarse_integral[n])

    def _restrict_nodes(self, fine, coarse, fine_values):
        _, Rcoll = self.get_time_matrices(fine, coarse)

        # restrict in space
        tmp = []
        for value in fine_values:
            coarse_value = coarse.encap_factory.create()
            self.restrict_data(value, coarse_value)
            tmp.append(coarse_value)

        # restrict in time
        result = []
        for n in range(coarse.quadrature.get_num_nodes()):
            coarse_value = coarse.encap_factory.create()
            for m in range(len(tmp)):
                coarse_value.scaled_add(Rcoll[n, m], tmp[m])
            result.append(coarse_value)
        return result
