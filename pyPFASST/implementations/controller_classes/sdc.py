from pyPFASST.core.controller import Controller
from pyPFASST.core.errors import ControllerError


class SDC(Controller):
    """
    Controller for classical (single level) SDC, stepping sequentially through time
    """

    def setup(self):
        if self.nlevels != 1:
            msg = f'SDC works on exactly one level, got {self.nlevels}'
            self.logger.error(msg)
            raise ControllerError(msg)
        super().setup()

    def run(self, u0):
        """
        Main driver for running the serial version of SDC

        Args:
            u0 (Encapsulation): initial value

        Returns:
            Encapsulation: solution at the end of the last time step
        """
        sweeper = self.get_level(0)
        sweeper.initial_state.copy_from(u0)

        for step in range(self.nsteps):
            self.set_step(step, self.params.t0 + step * self.dt)

            sweeper.spread()
            sweeper.pre_predict()
            sweeper.predict()
            sweeper.post_predict()

            for iteration in range(1, self.niters + 1):
                self.set_iteration(iteration)

                sweeper.save()
                sweeper.pre_sweep()
                sweeper.sweep()
                sweeper.post_sweep()

                if sweeper.converged():
                    break

            self.logger.info(
                f'step {step}: {sweeper.status.iteration} iterations, residual {sweeper.status.abs_res_norm}'
            )

            sweeper.post_step()
            if step < self.nsteps - 1:
                sweeper.advance()

        return sweeper.end_state.copy()
