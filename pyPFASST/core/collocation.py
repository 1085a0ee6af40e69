import logging
import numpy as np
from qmat import Q_GENERATORS

from pyPFASST.core.errors import CollocationError


class CollBase(object):
    """
    Quadrature table for the sweepers, i.e. nodes, weights and integration matrices over the unit interval.

    It is based on the two main parameters that define the nodes:

    - node_type: the node distribution used for the collocation method (EQUID, LEGENDRE, CHEBY-{1,2,3,4})
    - quad_type: the type of quadrature used (GAUSS, RADAU-LEFT, RADAU-RIGHT, LOBATTO)

    All coefficients are generated using
    `qmat <https://qmat.readthedocs.io/en/latest/autoapi/qmat/qcoeff/collocation/index.html>`_.

    Attributes:
        num_nodes (int): number of collocation nodes
        tleft (float): left interval point
        tright (float): right interval point
        nodes (numpy.ndarray): array of quadrature nodes
        weights (numpy.ndarray): array of quadrature weights for the full interval
        Qmat (numpy.ndarray): matrix containing the weights for tleft to node, with a leading row/column of zeros
        Smat (numpy.ndarray): matrix containing the weights for node to node, with a leading row/column of zeros
        delta_m (numpy.ndarray): array of distances between nodes (the first one measured from tleft)
        right_is_node (bool): flag to indicate whether right point is collocation node
        left_is_node (bool): flag to indicate whether left point is collocation node
        order (int): order of the quadrature
    """

    def __init__(self, num_nodes=None, tleft=0, tright=1, node_type='LEGENDRE', quad_type='RADAU-RIGHT', **kwargs):
        """
        Initialization routine for a collocation object

        Args:
            num_nodes (int): number of collocation nodes
            tleft (float): left interval point
            tright (float): right interval point
            node_type (str): node distribution
            quad_type (str): quadrature type
        """

        if num_nodes is None or not num_nodes > 0:
            raise CollocationError('at least one quadrature node required, got %s' % num_nodes)
        if not tleft < tright:
            raise CollocationError('interval boundaries are corrupt, got %s and %s' % (tleft, tright))

        self.logger = logging.getLogger('collocation')
        try:
            self.generator = Q_GENERATORS["Collocation"](
                nNodes=num_nodes, nodeType=node_type, quadType=quad_type, tLeft=tleft, tRight=tright
            )
        except Exception as e:
            raise CollocationError(f"could not instantiate qmat generator, got error: {e}") from e

        self.num_nodes = num_nodes
        self.tleft = tleft
        self.tright = tright
        self.node_type = node_type
        self.quad_type = quad_type
        self.left_is_node = self.quad_type in ['LOBATTO', 'RADAU-LEFT']
        self.right_is_node = self.quad_type in ['LOBATTO', 'RADAU-RIGHT']

        self.order = self.generator.order

        self.nodes = np.asarray(self.generator.nodes, dtype=float).copy()
        self.weights = np.asarray(self.generator.weights, dtype=float).copy()

        Q = np.zeros([num_nodes + 1, num_nodes + 1], dtype=float)
        Q[1:, 1:] = self.generator.Q
        self.Qmat = Q

        self.Smat = self._gen_Smatrix
        self.delta_m = self._gen_deltas

    def get_nodes(self):
        """
        Returns:
            numpy.ndarray: copy of the quadrature nodes
        """
        return self.nodes.copy()

    def get_num_nodes(self):
        return self.num_nodes

    @property
    def _gen_Smatrix(self):
        """
        Compute node-to-node integration matrix for later use in collocation formulation

        Returns:
            numpy.ndarray: matrix containing the weights for node to node
        """
        M = self.num_nodes
        Q = self.Qmat
        S = np.zeros([M + 1, M + 1])

        S[1, :] = Q[1, :]
        for m in np.arange(2, M + 1):
            S[m, :] = Q[m, :] - Q[m - 1, :]

        return S

    @property
    def _gen_deltas(self):
        """
        Compute distances between the nodes

        Returns:
            numpy.ndarray: distances between the nodes
        """
        M = self.num_nodes
        delta = np.zeros(M)
        delta[0] = self.nodes[0] - self.tleft
        for m in np.arange(1, M):
            delta[m] = self.nodes[m] - self.nodes[m - 1]

        return delta

    def expected_error(self):
        """
        Error of the quadrature rule when integrating the first monomial it cannot integrate exactly

        Returns:
            float: absolute quadrature error for t^order over the interval
        """
        p = self.order
        exact = (self.tright ** (p + 1) - self.tleft ** (p + 1)) / (p + 1)
        approx = np.dot(self.weights, self.nodes**p)
        return float(abs(exact - approx))

    def print_summary(self):
        """
        Returns:
            str: one-line description of this quadrature
        """
        return (
            f'{self.node_type}-{self.quad_type} with {self.num_nodes} nodes of order {self.order} on '
            f'[{self.tleft}, {self.tright}]'
        )

    @staticmethod
    def evaluate(weights, data):
        """
        Evaluates the quadrature over the full interval

        Args:
            weights (numpy.ndarray): array of quadrature weights for the full interval
            data (numpy.ndarray): f(x) to be integrated

        Returns:
            numpy.ndarray: integral over f(x) between tleft and tright
        """
        if not np.size(weights) == np.size(data):
            raise CollocationError("Input size does not match number of weights, but is %s" % np.size(data))

        return np.dot(weights, data)
