import threading

from dumbthieves.process import Process, ProcessState
from dumbthieves.waitqueue import Request


def test_initial_state():
    process = Process(rank=3)
    assert process.rank == 3
    assert process.state is ProcessState.RESTING
    assert process.lamport_clock == 0
    assert process.last_req_clock == 0
    assert process.house_id == -1
    assert process.ack_count == 0
    assert process.houses_visited_count == 0
    assert process.house_queue.is_empty()
    assert process.fence_queue.is_empty()


def test_queues_are_independent():
    first, second = Process(rank=0), Process(rank=1)
    first.house_queue.enqueue(Request(rank=1, lamport_clock=1))
    assert second.house_queue.is_empty()
    assert first.fence_queue.is_empty()


def test_increment_clock():
    process = Process(rank=0)
    assert process.increment_clock() == 1
    assert process.increment_clock() == 2
    assert process.lamport_clock == 2


def test_recv_with_larger_clock():
    process = Process(rank=0, lamport_clock=2)
    assert process.update_clock_upon_recv(10) == 11
    assert process.lamport_clock == 11


def test_recv_with_smaller_clock():
    process = Process(rank=0, lamport_clock=10)
    new = process.update_clock_upon_recv(4)
    assert new == process.lamport_clock
    assert new > 10


def test_acks_count_and_reset():
    process = Process(rank=0)
    assert process.add_ack() == 1
    assert process.add_ack() == 2
    process.reset_acks()
    assert process.ack_count == 0


def test_wait_for_acks_already_satisfied():
    process = Process(rank=0)
    process.add_ack()
    assert process.wait_for_acks(1, timeout=0.1) is True
    assert process.wait_for_acks(0) is True


def test_wait_for_acks_times_out():
    process = Process(rank=0)
    assert process.wait_for_acks(1, timeout=0.05) is False


def test_wait_for_acks_woken_by_other_thread():
    process = Process(rank=0)

    def ack_later():
        for _ in range(3):
            process.add_ack()

    worker = threading.Thread(target=ack_later)
    worker.start()
    result = process.wait_for_acks(3, timeout=5)
    worker.join()
    assert result is True
    assert process.ack_count == 3


def test_new_process_starts_in_first_declared_state():
    process = Process(rank=0)
    states = list(ProcessState)
    assert process.state is states[0]
    assert [s.name for s in states] == [
        "RESTING",
        "WAITING_FOR_HOUSE",
        "ROBBING_HOUSE",
        "WAITING_FOR_FENCE",
        "HAS_FENCE",
    ]