"""Tests for communicators and worker-group launchers."""
import queue

import pytest

from strongin_app.core.comm import (
    COORDINATOR_RANK,
    TAG_COLLECTIVE,
    TAG_P2P,
    CommunicationError,
    QueueCommunicator,
    Role,
    SoloCommunicator,
    make_inboxes,
    run_threaded,
)
from strongin_app.core.segment import CharacteristicRecord

TIMEOUT = 30.0


def _identity(comm):
    """Helper target: report who this worker is."""
    return comm.rank, comm.size, comm.role


def _broadcast_float(comm):
    """Helper target: coordinator broadcasts 3.5."""
    return comm.bcast_float(3.5 if comm.is_coordinator else None)


def _reduce_ranks(comm):
    """Helper target: max of rank numbers, visible on the coordinator only."""
    return comm.reduce_max(float(comm.rank) * 1.5)


def _broadcast_record(comm):
    """Helper target: coordinator broadcasts a characteristic record."""
    record = CharacteristicRecord(value=4.0, index=3) if comm.is_coordinator else None
    return comm.bcast_record(record)


def _ordered_messages(comm):
    """Helper target: worker 1 sends three messages, coordinator reads them."""
    if comm.rank == 1:
        for payload in (b"a", b"bb", b"ccc"):
            comm.send_bytes(payload, COORDINATOR_RANK)
        return None
    if comm.is_coordinator:
        return [comm.recv_bytes(1) for _ in range(3)]
    return None


def _failing(comm):
    """Helper target: worker 1 raises, the rest wait for a message that never comes."""
    if comm.rank == 1:
        raise ValueError("boom")
    return comm.recv_bytes(1)


# ==========================================
# SoloCommunicator
# ==========================================


class TestSoloCommunicator:
    """Test the single-worker group."""

    def test_identity(self):
        """Rank 0 of 1, coordinator role."""
        comm = SoloCommunicator()
        assert comm.rank == 0
        assert comm.size == 1
        assert comm.role is Role.COORDINATOR
        assert comm.is_coordinator

    def test_collectives_are_identities(self):
        """Broadcast and reduce return the local value."""
        comm = SoloCommunicator()
        assert comm.bcast_float(2.5) == 2.5
        assert comm.reduce_max(7.0) == 7.0
        assert comm.bcast_record(CharacteristicRecord(1.0, 0)) == CharacteristicRecord(1.0, 0)

    def test_point_to_point_raises(self):
        """There is nobody to talk to."""
        comm = SoloCommunicator()
        with pytest.raises(CommunicationError):
            comm.send_bytes(b"x", 1)
        with pytest.raises(CommunicationError):
            comm.recv_bytes(1)

    def test_root_broadcast_requires_payload(self):
        """Root must supply the payload."""
        with pytest.raises(ValueError):
            SoloCommunicator().bcast_bytes(None)


# ==========================================
# QueueCommunicator
# ==========================================


class TestQueueCommunicator:
    """Test the queue-backed channel directly."""

    def test_one_inbox_per_pair_and_tag(self):
        """Inboxes keyed by (dest, source, tag), no self-channels."""
        inboxes = make_inboxes(3, queue.Queue)
        assert len(inboxes) == 3 * 2 * 2
        assert (0, 1, TAG_P2P) in inboxes
        assert (0, 1, TAG_COLLECTIVE) in inboxes
        assert (0, 0, TAG_P2P) not in inboxes

    def test_tags_do_not_mix(self):
        """A collective message is not visible on the point-to-point channel."""
        inboxes = make_inboxes(2, queue.Queue)
        sender = QueueCommunicator(1, 2, inboxes)
        receiver = QueueCommunicator(0, 2, inboxes, timeout=0.05)
        sender.send_bytes(b"collective", 0, tag=TAG_COLLECTIVE)
        with pytest.raises(CommunicationError):
            receiver.recv_bytes(1, tag=TAG_P2P)
        assert receiver.recv_bytes(1, tag=TAG_COLLECTIVE) == b"collective"

    def test_recv_timeout_raises(self):
        """Waiting past the timeout is a communication error."""
        comm = QueueCommunicator(0, 2, make_inboxes(2, queue.Queue), timeout=0.05)
        with pytest.raises(CommunicationError, match="не дочекався"):
            comm.recv_bytes(1)

    def test_rank_out_of_range(self):
        """Rank must lie inside the group."""
        with pytest.raises(ValueError):
            QueueCommunicator(2, 2, make_inboxes(2, queue.Queue))

    def test_worker_role(self):
        """Non-zero ranks are plain workers."""
        comm = QueueCommunicator(1, 2, make_inboxes(2, queue.Queue))
        assert comm.role is Role.WORKER
        assert not comm.is_coordinator


# ==========================================
# run_threaded
# ==========================================


class TestRunThreaded:
    """Test the thread-backed worker group."""

    def test_results_in_rank_order(self):
        """Each worker sees its own rank; results come back by rank."""
        results = run_threaded(4, _identity, timeout=TIMEOUT)
        assert [r[0] for r in results] == [0, 1, 2, 3]
        assert all(r[1] == 4 for r in results)
        assert results[0][2] is Role.COORDINATOR
        assert all(r[2] is Role.WORKER for r in results[1:])

    def test_bcast_float(self):
        """Every worker receives the coordinator's value."""
        assert run_threaded(3, _broadcast_float, timeout=TIMEOUT) == [3.5, 3.5, 3.5]

    def test_reduce_max_on_coordinator_only(self):
        """Coordinator gets the maximum, others get None."""
        results = run_threaded(4, _reduce_ranks, timeout=TIMEOUT)
        assert results[0] == 4.5
        assert results[1:] == [None, None, None]

    def test_bcast_record(self):
        """Records arrive intact on every worker."""
        results = run_threaded(3, _broadcast_record, timeout=TIMEOUT)
        assert results == [CharacteristicRecord(4.0, 3)] * 3

    def test_messages_keep_order(self):
        """Messages between one pair of workers arrive in send order."""
        results = run_threaded(2, _ordered_messages, timeout=TIMEOUT)
        assert results[0] == [b"a", b"bb", b"ccc"]

    def test_worker_failure_is_reraised(self):
        """A worker exception surfaces as CommunicationError with the cause attached."""
        with pytest.raises(CommunicationError) as excinfo:
            run_threaded(3, _failing, timeout=1.0)
        assert isinstance(excinfo.value.__cause__, (ValueError, CommunicationError))

    def test_group_size_must_be_positive(self):
        """An empty group is rejected."""
        with pytest.raises(ValueError):
            run_threaded(0, _identity)
