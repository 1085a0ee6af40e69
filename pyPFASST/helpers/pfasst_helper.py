import logging


class FrozenClass(object):
    """
    Helper class to freeze a class, i.e. to avoid adding more attributes once the parameters and the status of an
    object have been set up

    Attributes:
        __isfrozen: Flag to freeze a class
    """

    attrs = []

    __isfrozen = False

    def __setattr__(self, key, value):
        """
        Function called when setting attributes

        Args:
            key: the attribute
            value: the value
        """

        # check if attribute exists and if class is frozen
        if self.__isfrozen and not (key in self.attrs or hasattr(self, key)):
            raise TypeError(f'{type(self).__name__!r} is a frozen class, cannot add attribute {key!r}')

        object.__setattr__(self, key, value)

    def __getattr__(self, key):
        """
        Attributes added via `add_attr` read as None until they are set
        """
        if key in self.attrs:
            return None
        return super().__getattribute__(key)

    @classmethod
    def add_attr(cls, key):
        """
        Add a key to the allowed attributes of this class, e.g. for bookkeeping added by a controller

        Args:
            key (str): The key to add
        """
        logger = logging.getLogger(cls.__name__)
        if key in cls.attrs:
            logger.debug(f'Skip adding attribute {key!r} because it already exists in {cls.__name__}!')
        else:
            # copy to not change the allowed attributes of the base class
            cls.attrs = cls.attrs + [key]
            logger.debug(f'Added attribute {key!r} to {cls.__name__}')

    def _freeze(self):
        """
        Function to freeze the class
        """
        self.__isfrozen = True

    def get(self, key, default=None):
        """
        Wrapper for `__dict__.get` to use when reading variables that might not exist, depending on the configuration

        Args:
            key (str): Name of the variable you wish to read
            default: Value to be returned if the variable does not exist

        Returns:
            __dict__.get(key, default)
        """
        return self.__dict__.get(key, default)
