import logging

from pyPFASST.core.errors import NotImplementedYetError


class Communicator(object):
    """
    Base class for point-to-point communication between the time ranks

    Outstanding non-blocking requests are stored by (peer, tag). Before a new request with the same key is issued, the
    old one is completed, and all remaining requests are waited on during cleanup. Requests have to provide `Wait()`.

    Attributes:
        logger: custom logger for communication-related logging
        requests (dict): outstanding requests, keyed by (peer, tag)
        buffers (dict): buffers belonging to the outstanding requests
    """

    def __init__(self):
        self.logger = logging.getLogger('comm-p2p')
        self.requests = {}
        self.buffers = {}

    @property
    def size(self):
        raise NotImplementedYetError('size of generic communicator')

    @property
    def rank(self):
        raise NotImplementedYetError('rank of generic communicator')

    @property
    def name(self):
        return f'rank {self.rank}'

    @property
    def is_first(self):
        return self.rank == 0

    @property
    def is_last(self):
        return self.rank == self.size - 1

    def complete_or_wait(self, key):
        """
        Wait on the outstanding request with the given key (if any) and forget about it afterwards

        Args:
            key (tuple): (peer, tag) of the request
        """
        if key in self.requests:
            self.logger.warning(f'request for (peer, tag) = {key} still active, waiting for it to complete')
            self._wait(self.requests[key])
            del self.requests[key]
            self.buffers.pop(key, None)

    def add_request(self, key, request, buffer=None):
        """
        Register a new outstanding request

        Args:
            key (tuple): (peer, tag) of the request
            request: the request object
            buffer: data which has to be kept alive until the request completed
        """
        self.complete_or_wait(key)
        self.requests[key] = request
        if buffer is not None:
            self.buffers[key] = buffer

    def cleanup(self):
        """
        Wait on all outstanding requests
        """
        self.logger.debug(f'cleaning up {len(self.requests)} outstanding requests')
        for key in list(self.requests.keys()):
            self.logger.debug(f'waiting for request (peer, tag) = {key}')
            self._wait(self.requests.pop(key))
            self.buffers.pop(key, None)

    def _wait(self, request):
        request.Wait()

    def send(self, data, dest, tag):
        raise NotImplementedYetError('blocking send for generic communicator')

    def recv(self, data, source, tag):
        raise NotImplementedYetError('blocking receive for generic communicator')

    def isend(self, data, dest, tag):
        raise NotImplementedYetError('non-blocking send for generic communicator')

    def irecv(self, data, source, tag):
        raise NotImplementedYetError('non-blocking receive for generic communicator')

    def bcast(self, data, root):
        raise NotImplementedYetError('broadcast for generic communicator')

    def allreduce_and(self, flag):
        raise NotImplementedYetError('logical reduction for generic communicator')

    def probe(self, source, tag):
        raise NotImplementedYetError('probe for generic communicator')

    def abort(self, code=1):
        raise NotImplementedYetError('abort for generic communicator')
