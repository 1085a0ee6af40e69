import logging

from pyPFASST.core.errors import NotImplementedYetError
from pyPFASST.helpers.pfasst_helper import FrozenClass


# short helper class to add params as attributes
class _Pars(FrozenClass):
    def __init__(self, pars):
        self.coarsening_factor = 2
        for k, v in pars.items():
            setattr(self, k, v)

        self._freeze()


class Transfer(object):
    """
    Abstract transfer class, moving data between the sweepers of two neighboring levels

    The sweeper-level operations take the coarse and the fine sweeper (in the order the data flows) and act on their
    node data, the data-level operations act on single encapsulations. Nothing is implemented here.

    Attributes:
        logger: custom logger for transfer-related logging
        params (_Pars): parameter object containing the custom parameters passed by the user
    """

    def __init__(self, params=None):
        """
        Initialization routine

        Args:
            params (dict): parameters for the transfer operators
        """
        self.params = _Pars(params if params is not None else {})

        # set up logger
        self.logger = logging.getLogger('transfer')

    def interpolate_initial(self, coarse, fine):
        raise NotImplementedYetError('interpolation of initial values for generic Sweeper')

    def interpolate(self, coarse, fine, initial=False):
        raise NotImplementedYetError('interpolation for generic Sweeper')

    def interpolate_data(self, coarse, fine):
        raise NotImplementedYetError('interpolation for generic Encapsulations')

    def restrict_initial(self, fine, coarse):
        raise NotImplementedYetError('restriction of initial value for generic Sweeper')

    def restrict(self, fine, coarse, initial=False):
        raise NotImplementedYetError('restriction for generic Sweeper')

    def restrict_data(self, fine, coarse):
        raise NotImplementedYetError('restriction for generic Encapsulations')

    def fas(self, dt, fine, coarse):
        raise NotImplementedYetError('FAS correction for generic Sweeper')
