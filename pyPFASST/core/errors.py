class DataError(Exception):
    """
    Error Class handling/indicating problems with data types, e.g. arithmetic between incompatible encapsulations
    """

    pass


class ParameterError(Exception):
    """
    Error Class handling/indicating problems with parameters (mostly within dictionaries)
    """

    pass


class SetupError(Exception):
    """
    Error class handling/indicating sweepers or controllers used before all their components were attached
    """

    pass


class NotImplementedYetError(NotImplementedError):
    """
    Error class indicating an operation of a generic template which has to be overridden by a specialization
    """

    def __init__(self, what):
        super().__init__(f'not implemented yet: {what}')


class CollocationError(Exception):
    """
    Error class handling/indicating problems with the collocation
    """

    pass


class UnsupportedQuadratureError(CollocationError):
    """
    Error class indicating an operation which is not possible with the chosen quadrature
    """

    pass


class TransferError(Exception):
    """
    Error class handling/indicating problems with the transfer processes
    """

    pass


class NonCubeShapeError(TransferError):
    """
    Error class indicating that the degrees of freedom of an encapsulation do not form a (hyper-)cube
    """

    pass


class UnsupportedCoarseningError(TransferError):
    """
    Error class indicating a coarsening factor the transfer operators cannot handle
    """

    pass


class CommunicationError(Exception):
    """
    Error class handling/indicating problems with the communication
    """

    pass


class ControllerError(Exception):
    """
    Error class handling/indicating problems with the controller
    """

    pass


class ProblemError(Exception):
    """
    Error class handling/indicating problems with the problem classes
    """

    pass

