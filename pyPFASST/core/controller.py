import logging
import os
import sys

from pyPFASST.core.errors import ControllerError, NotImplementedYetError
from pyPFASST.core.status import Status
from pyPFASST.helpers.pfasst_helper import FrozenClass


# short helper class to add params as attributes
class _Pars(FrozenClass):
    def __init__(self, params):
        self.t0 = 0.0
        self.logger_level = 20
        self.log_to_file = False
        self.fname = 'run_pid' + str(os.getpid()) + '.log'

        for k, v in params.items():
            setattr(self, k, v)

        self._freeze()


class LevelIter(object):
    """
    Cursor walking through the level hierarchy of a controller

    It keeps track of the current level and gives access to the current sweeper, its finer and coarser neighbors and
    the transfer connecting the current level to its coarser neighbor.

    Attributes:
        controller (Controller): the controller owning the hierarchy
        level (int): index of the current level, 0 is the coarsest
    """

    def __init__(self, level, controller):
        self.controller = controller
        self.level = level

    def current(self):
        return self.controller.get_level(self.level)

    def fine(self):
        """
        Returns:
            Sweeper: the next finer level

        Raises:
            IndexError: if the cursor is at the finest level
        """
        return self.controller.get_level(self.level + 1)

    def coarse(self):
        """
        Returns:
            Sweeper: the next coarser level

        Raises:
            IndexError: if the cursor is at the coarsest level
        """
        return self.controller.get_level(self.level - 1)

    def transfer(self):
        return self.controller.get_transfer(self.level)

    def increment(self):
        self.level += 1
        return self

    def decrement(self):
        self.level -= 1
        return self

    def __add__(self, other):
        return LevelIter(self.level + other, self.controller)

    def __sub__(self, other):
        return LevelIter(self.level - other, self.controller)

    def __iadd__(self, other):
        self.level += other
        return self

    def __isub__(self, other):
        self.level -= other
        return self

    def __eq__(self, other):
        return self.level == other.level

    def __ne__(self, other):
        return self.level != other.level

    def __lt__(self, other):
        return self.level < other.level

    def __le__(self, other):
        return self.level <= other.level

    def __gt__(self, other):
        return self.level > other.level

    def __ge__(self, other):
        return self.level >= other.level

    def __repr__(self):
        return f'LevelIter(level={self.level})'


class Controller(object):
    """
    Base controller class, holding the hierarchy of levels (coarsest first) and the transfer operators between them

    The transfer stored with a level connects it to its coarser neighbor, hence the coarsest level has no transfer.

    Attributes:
        logger: custom logger for controller-related logging
        params (_Pars): parameter object containing the custom parameters passed by the user
        levels (list): the sweepers, coarsest first
        transfers (list): the transfer operators, one per level (None for the coarsest)
        dt (float): size of the time steps
        nsteps (int): number of time steps
        niters (int): maximum number of iterations per time step
    """

    def __init__(self, controller_params=None):
        """
        Initialization routine for the base controller

        Args:
            controller_params (dict): parameter set for the controller
        """
        self.params = _Pars(controller_params if controller_params is not None else {})

        self.setup_custom_logger(self.params.logger_level, self.params.log_to_file, self.params.fname)
        self.logger = logging.getLogger('controller')

        self.levels = []
        self.transfers = []

        self.dt = None
        self.nsteps = None
        self.niters = None

    @staticmethod
    def setup_custom_logger(level=None, log_to_file=None, fname=None):
        """
        Helper function to set main parameters for the logging facility

        Args:
            level (int): level of logging
            log_to_file (bool): flag to turn on/off logging to file
            fname (str): name of the log file
        """

        assert type(level) is int

        # specify formats and handlers
        if log_to_file:
            file_formatter = logging.Formatter(
                fmt='%(asctime)s - %(name)s - %(module)s - %(funcName)s - %(lineno)d - %(levelname)s: %(message)s'
            )
            file_handler = logging.FileHandler(fname, mode='a' if os.path.isfile(fname) else 'w')
            file_handler.setFormatter(file_formatter)
        else:
            file_handler = None

        std_formatter = logging.Formatter(fmt='%(name)s - %(levelname)s: %(message)s')
        std_handler = logging.StreamHandler(sys.stdout)
        std_handler.setFormatter(std_formatter)

        # instantiate logger
        logger = logging.getLogger('')

        # remove handlers from previous calls to controller
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        logger.setLevel(level)
        logger.addHandler(std_handler)
        if file_handler is not None:
            logger.addHandler(file_handler)

    def set_duration(self, dt, nsteps, niters):
        """
        Args:
            dt (float): size of the time steps
            nsteps (int): number of time steps
            niters (int): maximum number of iterations per time step
        """
        self.dt = dt
        self.nsteps = nsteps
        self.niters = niters

    @property
    def t_end(self):
        return self.params.t0 + self.nsteps * self.dt

    def add_level(self, sweeper, transfer=None, coarse=True):
        """
        Add a level to the hierarchy

        Args:
            sweeper (Sweeper): the sweeper of the new level
            transfer (Transfer): transfer between the new level and its coarser neighbor
            coarse (bool): add as new coarsest level, else as new finest level
        """
        if coarse:
            self.levels.insert(0, sweeper)
            self.transfers.insert(0, transfer)
        else:
            self.levels.append(sweeper)
            self.transfers.append(transfer)

    @property
    def nlevels(self):
        return len(self.levels)

    def get_level(self, level):
        if not 0 <= level < self.nlevels:
            raise IndexError(f'level {level} out of range, have {self.nlevels} levels')
        return self.levels[level]

    def get_transfer(self, level):
        if not 0 <= level < self.nlevels:
            raise IndexError(f'level {level} out of range, have {self.nlevels} levels')
        return self.transfers[level]

    def finest(self):
        return LevelIter(self.nlevels - 1, self)

    def coarsest(self):
        return LevelIter(0, self)

    def setup(self):
        """
        Attach a status to each level without one and set up all levels, coarsest first
        """
        if self.nlevels == 0:
            msg = 'need at least one level to set up the controller'
            self.logger.error(msg)
            raise ControllerError(msg)

        for sweeper in self.levels:
            if sweeper.status is None:
                if self.dt is None:
                    msg = 'duration not yet set, call set_duration first'
                    self.logger.error(msg)
                    raise ControllerError(msg)
                sweeper.status = Status(
                    time=self.params.t0,
                    dt=self.dt,
                    t_end=self.t_end,
                    num_steps=self.nsteps,
                    max_iterations=self.niters,
                )

        level = self.coarsest()
        while level <= self.finest():
            level.current().setup()
            level.increment()

    def set_step(self, step, time):
        """
        Prepare the status of all levels for a new time step

        Args:
            step (int): index of the time step
            time (float): start time of the time step
        """
        for sweeper in self.levels:
            sweeper.status.reset()
            sweeper.status.step = step
            sweeper.status.time = time

    def set_iteration(self, iteration):
        for sweeper in self.levels:
            sweeper.status.iteration = iteration

    def run(self, u0):
        """
        Abstract interface to the time stepping
        """
        raise NotImplementedYetError('time stepping for generic controller')
