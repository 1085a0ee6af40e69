from pyPFASST.core.errors import ControllerError
from pyPFASST.implementations.controller_classes.mlsdc import MLSDC


class PFASST(MLSDC):
    """
    Controller for PFASST, each rank of the communicator working on one time step of a block of time steps

    The coarsest level runs a pipelined predictor and receives its initial value from the previous rank (blocking) in
    every iteration before sweeping, sending its end value to the next rank right after. The initial value of the finest
    level is updated with the end value of the previous rank from the last iteration and restricted to the levels in
    between. Each block iterates until the finest level has converged on all ranks or the budget of iterations is used
    up, afterwards the end value of the last rank is broadcast as initial value for the next block.

    Attributes:
        comm (Communicator): the communicator connecting the time ranks
    """

    def __init__(self, comm, controller_params=None):
        """
        Initialization routine for the PFASST controller

        Args:
            comm (Communicator): the communicator connecting the time ranks
            controller_params (dict): parameter set for the controller
        """
        super().__init__(controller_params)
        self.comm = comm

    def setup(self):
        if self.nsteps % self.comm.size != 0:
            msg = f'number of time steps ({self.nsteps}) has to be a multiple of the number of ranks ({self.comm.size})'
            self.logger.error(msg)
            raise ControllerError(msg)
        super().setup()

    def recv_initial(self, level):
        sweeper = level.current()
        if not self.comm.is_first:
            self.comm.recv(sweeper.initial_state, source=self.comm.rank - 1, tag=level.level)
            sweeper.reevaluate(initial_only=True)

    def send_end(self, level):
        if not self.comm.is_last:
            self.comm.isend(level.current().end_state, dest=self.comm.rank + 1, tag=level.level)

    def predict(self):
        """
        Pipelined predictor on the coarsest level, interpolated to all finer levels
        """
        self.restrict_initial_values()

        level = self.coarsest()
        coarse = level.current()
        self.recv_initial(level)
        coarse.spread()
        coarse.pre_predict()
        coarse.predict()
        coarse.post_predict()
        self.send_end(level)

        level.increment()
        while level <= self.finest():
            fine = level.current()
            coarse = level.coarse()
            transfer = level.transfer()

            # coarse prediction relative to the restricted initial value of this level
            fine.spread()
            for previous in coarse.previous_states:
                transfer.restrict_data(fine.initial_state, previous)
            transfer.interpolate(coarse, fine, initial=True)
            fine.integrate_end_state(self.dt)

            level.increment()

    def update_initial_values(self):
        """
        Restrict the initial value of the finest level to the levels in between, the coarsest level receives its own
        """
        level = self.finest()
        while level - 1 > self.coarsest():
            level.transfer().restrict_initial(level.current(), level.coarse())
            level.coarse().reevaluate(initial_only=True)
            level.decrement()

    def cycle_bottom(self, level):
        self.recv_initial(level)
        self.perform_sweep(level.current())
        self.send_end(level)

    def run(self, u0):
        """
        Main driver for running PFASST

        Args:
            u0 (Encapsulation): initial value for the finest level

        Returns:
            Encapsulation: solution at the end of the last time step on the finest level (same on all ranks)
        """
        finest_level = self.finest()
        finest = finest_level.current()
        finest.initial_state.copy_from(u0)

        nblocks = self.nsteps // self.comm.size
        multi_level = self.nlevels > 1

        for block in range(nblocks):
            step = block * self.comm.size + self.comm.rank
            self.set_step(step, self.params.t0 + step * self.dt)

            self.predict()

            for iteration in range(1, self.niters + 1):
                self.set_iteration(iteration)

                # with a single level the coarsest level communicates in cycle_bottom only
                if multi_level and iteration > 1:
                    self.recv_initial(finest_level)
                    self.update_initial_values()

                self.cycle_v(finest_level)
                finest.integrate_end_state(self.dt)

                # all ranks stop together, so no message is left without its receive
                done = self.comm.allreduce_and(finest.converged())

                if multi_level and not done and iteration < self.niters:
                    self.send_end(finest_level)

                if done:
                    break

            self.logger.info(
                f'block {block}, step {step}: {finest.status.iteration} iterations, '
                f'residual {finest.status.abs_res_norm}'
            )

            self.comm.bcast(finest.end_state, root=self.comm.size - 1)
            self.post_step_all(last=block == nblocks - 1)

        self.comm.cleanup()
        return finest.end_state.copy()
