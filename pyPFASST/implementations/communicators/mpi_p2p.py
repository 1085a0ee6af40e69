from mpi4py import MPI

from pyPFASST.core.communicator import Communicator
from pyPFASST.core.errors import CommunicationError


def status_to_string(status):
    """
    Helper routine to describe an MPI status

    Args:
        status (MPI.Status): the status

    Returns:
        str: human readable description
    """
    if status.Get_source() == MPI.ANY_SOURCE and status.Get_tag() == MPI.ANY_TAG:
        return 'MPI_Status(empty)'
    return (
        f'MPI_Status(source={status.Get_source()}, tag={status.Get_tag()}, count={status.Get_count(MPI.DOUBLE)})'
    )


class MpiP2P(Communicator):
    """
    Point-to-point communication between time ranks using mpi4py

    All data is sent as flat buffers of doubles. Errors raised by MPI are converted to CommunicationError.

    Attributes:
        comm: the MPI communicator
    """

    def __init__(self, comm=None):
        super().__init__()
        self.comm = comm if comm is not None else MPI.COMM_WORLD
        self._size = self.comm.Get_size()
        self._rank = self.comm.Get_rank()
        self._name = self.comm.Get_name()
        self.logger.debug(f'communicator {self._name!r} with {self._size} ranks, this is rank {self._rank}')

    @property
    def size(self):
        return self._size

    @property
    def rank(self):
        return self._rank

    @property
    def name(self):
        return self._name

    def _call(self, what, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except MPI.Exception as e:
            msg = f'MPI encountered an error during {what}: {e.Get_error_string()} (code={e.Get_error_code()})'
            self.logger.error(msg)
            raise CommunicationError(msg) from e

    def _wait(self, request):
        self._call('wait', request.Wait)

    def send(self, data, dest, tag):
        """
        Blocking send

        Args:
            data (Encapsulation): data to send
            dest (int): target rank
            tag (int): communication tag
        """
        self.logger.debug(f'sending {data.size} values to rank {dest} with tag {tag}')
        self._call('send', self.comm.Send, [data.data, MPI.DOUBLE], dest=dest, tag=tag)

    def recv(self, data, source, tag):
        """
        Blocking receive into the given container

        Args:
            data (Encapsulation): container receiving the data
            source (int): source rank
            tag (int): communication tag

        Returns:
            str: description of the receive status
        """
        self.logger.debug(f'receiving {data.size} values from rank {source} with tag {tag}')
        status = MPI.Status()
        self._call('receive', self.comm.Recv, [data.data, MPI.DOUBLE], source=source, tag=tag, status=status)
        return status_to_string(status)

    def isend(self, data, dest, tag):
        """
        Non-blocking send of a copy of the data, an outstanding send with the same destination and tag is completed
        first

        Args:
            data (Encapsulation): data to send
            dest (int): target rank
            tag (int): communication tag
        """
        key = (dest, tag)
        self.complete_or_wait(key)

        buffer = data.data.copy()
        self.logger.debug(f'non-blocking send of {buffer.size} values to rank {dest} with tag {tag}')
        request = self._call('non-blocking send', self.comm.Issend, [buffer, MPI.DOUBLE], dest=dest, tag=tag)
        self.add_request(key, request, buffer)

    def irecv(self, data, source, tag):
        """
        Non-blocking receive into the given container, the container must not be touched before the request completed

        Args:
            data (Encapsulation): container receiving the data
            source (int): source rank
            tag (int): communication tag
        """
        key = (source, tag)
        self.complete_or_wait(key)

        self.logger.debug(f'non-blocking receive of {data.size} values from rank {source} with tag {tag}')
        request = self._call('non-blocking receive', self.comm.Irecv, [data.data, MPI.DOUBLE], source=source, tag=tag)
        self.add_request(key, request, data)

    def bcast(self, data, root):
        """
        Broadcast the data from the root rank to all others

        Args:
            data (Encapsulation): data to send (on root) or container receiving it (elsewhere)
            root (int): rank holding the data
        """
        self.logger.debug(f'broadcasting {data.size} values from rank {root}')
        self._call('broadcast', self.comm.Bcast, [data.data, MPI.DOUBLE], root=root)

    def allreduce_and(self, flag):
        """
        Logical and of a flag over all ranks

        Args:
            flag (bool): the local flag

        Returns:
            bool: True iff the flag is set on every rank
        """
        return bool(self._call('reduction', self.comm.allreduce, bool(flag), op=MPI.LAND))

    def probe(self, source, tag):
        """
        Blocking check for an incoming message

        Args:
            source (int): source rank
            tag (int): communication tag

        Returns:
            str: description of the status of the incoming message
        """
        status = MPI.Status()
        self._call('probe', self.comm.Probe, source=source, tag=tag, status=status)
        return status_to_string(status)

    def abort(self, code=1):
        self.logger.error(f'aborting all ranks with error code {code}')
        self.comm.Abort(code)
