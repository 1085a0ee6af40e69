from pyPFASST.helpers.pfasst_helper import FrozenClass


class Status(FrozenClass):
    """
    This class carries the status of a level during one time step. It is owned by the sweeper of this level and shared
    by reference with the controller and the transfer operators, which query it for convergence and timing information.

    Attributes:
        time (float): start time of the current step
        dt (float): size of the current step
        t_end (float): end time of the whole integration
        step (int): index of the current step
        num_steps (int): total number of steps
        iteration (int): current iteration, 0 means prediction
        max_iterations (int): iteration budget for each step
        abs_res_norms (list of float): absolute residual norm at each node
        rel_res_norms (list of float): relative residual norm at each node
        abs_res_norm (float): maximum absolute residual norm over all nodes
        rel_res_norm (float): maximum relative residual norm over all nodes
        converged (bool): result of the last convergence check
    """

    def __init__(self, time=0.0, dt=None, t_end=None, step=0, num_steps=None, max_iterations=None):
        self.time = time
        self.dt = dt
        self.t_end = t_end
        self.step = step
        self.num_steps = num_steps
        self.iteration = 0
        self.max_iterations = max_iterations
        self.abs_res_norms = []
        self.rel_res_norms = []
        self.abs_res_norm = None
        self.rel_res_norm = None
        self.converged = False
        # freeze class, no further attributes allowed from this point
        self._freeze()

    def reset(self):
        """
        Routine to clean-up the iteration dependent part of the status for the next time step
        """
        self.iteration = 0
        self.abs_res_norms = []
        self.rel_res_norms = []
        self.abs_res_norm = None
        self.rel_res_norm = None
        self.converged = False

    def __str__(self):
        return (
            f'Status(t={self.time}, dt={self.dt}, t_end={self.t_end}, step={self.step}, iteration={self.iteration}, '
            f'abs_res={self.abs_res_norm}, rel_res={self.rel_res_norm})'
        )
