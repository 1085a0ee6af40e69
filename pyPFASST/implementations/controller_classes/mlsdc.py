from pyPFASST.core.controller import Controller


class MLSDC(Controller):
    """
    Controller for multi-level SDC, i.e. V-cycles through the level hierarchy in each iteration

    Going down, each level is swept, restricted to its coarser neighbor and the FAS correction is computed there. After
    sweeping the coarsest level, the corrections are interpolated back up with additional sweeps on the intermediate
    levels. Convergence is checked on the finest level.
    """

    def perform_sweep(self, sweeper):
        sweeper.pre_sweep()
        sweeper.sweep()
        sweeper.post_sweep()

    def restrict_initial_values(self):
        """
        Restrict the initial value of the finest level down to all coarser levels
        """
        level = self.finest()
        while level > self.coarsest():
            level.transfer().restrict_initial(level.current(), level.coarse())
            level.decrement()

    def predict(self):
        """
        Predictor on all levels, each one starting from its own (restricted) initial value
        """
        self.restrict_initial_values()

        level = self.coarsest()
        while level <= self.finest():
            sweeper = level.current()
            sweeper.spread()
            sweeper.pre_predict()
            sweeper.predict()
            sweeper.post_predict()
            level.increment()

    def cycle_down(self, level):
        """
        Sweep on the current level, restrict to the coarser one and compute the FAS correction there
        """
        fine = level.current()
        coarse = level.coarse()
        transfer = level.transfer()

        self.perform_sweep(fine)

        transfer.restrict(fine, coarse)
        transfer.fas(self.dt, fine, coarse)
        coarse.save()

    def cycle_bottom(self, level):
        self.perform_sweep(level.current())

    def cycle_up(self, level):
        """
        Interpolate the coarse correction to the current level and sweep there (except on the finest level)
        """
        fine = level.current()
        level.transfer().interpolate(level.coarse(), fine)

        if level < self.finest():
            self.perform_sweep(fine)

    def cycle_v(self, level):
        if level == self.coarsest():
            self.cycle_bottom(level)
        else:
            self.cycle_down(level)
            self.cycle_v(level - 1)
            self.cycle_up(level)

    def run(self, u0):
        """
        Main driver for running the serial version of MLSDC

        Args:
            u0 (Encapsulation): initial value for the finest level

        Returns:
            Encapsulation: solution at the end of the last time step on the finest level
        """
        finest = self.finest().current()
        finest.initial_state.copy_from(u0)

        for step in range(self.nsteps):
            self.set_step(step, self.params.t0 + step * self.dt)

            self.predict()

            for iteration in range(1, self.niters + 1):
                self.set_iteration(iteration)

                self.cycle_v(self.finest())
                # the finest level has been corrected by interpolation only
                finest.integrate_end_state(self.dt)

                if finest.converged():
                    break

            self.logger.info(
                f'step {step}: {finest.status.iteration} iterations, residual {finest.status.abs_res_norm}'
            )

            self.post_step_all(last=step == self.nsteps - 1)

        return finest.end_state.copy()

    def post_step_all(self, last=False):
        level = self.coarsest()
        while level <= self.finest():
            level.current().post_step()
            if not last:
                level.current().advance()
            level.increment()
