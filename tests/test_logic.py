import io
import random
from unittest import mock

import pytest

from dumbthieves.communication import Communicator, Network
from dumbthieves.logic import Thief, run_simulation
from dumbthieves.messages import MessageType
from dumbthieves.process import Process, ProcessState
from dumbthieves.utils import Logger
from dumbthieves.waitqueue import Request


def make_thief(rank=0, size=1, num_houses=3, num_fences=1, sleeps=None):
    network = Network(size)
    stream = io.StringIO()
    process = Process(rank)
    comm = Communicator(process, network, Logger(stream))
    recorder = sleeps.append if sleeps is not None else (lambda s: None)
    thief = Thief(process, comm, num_houses, num_fences, size, random.Random(1), recorder)
    return thief, network, stream


def test_single_round_alone():
    sleeps = []
    thief, _, stream = make_thief(sleeps=sleeps)
    house = thief.run_round()
    assert house == 1
    text = stream.getvalue()
    assert "SELECTED house: 1" in text
    assert "ENTERING house: 1" in text
    assert "USING fence" in text
    assert "FINISHED job 1" in text
    assert thief.process.state is ProcessState.RESTING
    assert thief.process.houses_visited_count == 1
    assert thief.process.lamport_clock == 5


def test_sleep_durations_in_range():
    sleeps = []
    thief, _, _ = make_thief(sleeps=sleeps)
    thief.run(4)
    assert len(sleeps) == 8
    assert set(sleeps[0::2]) <= {1, 2}
    assert set(sleeps[1::2]) <= {1, 2, 3}


def test_run_counts_rounds():
    thief, _, _ = make_thief()
    houses = thief.run(3)
    assert len(houses) == 3
    assert thief.process.houses_visited_count == 3
    assert all(1 <= h <= thief.num_houses for h in houses)


def test_leave_critical_sections_acks_everyone():
    thief, network, _ = make_thief(size=3)
    process = thief.process
    process.house_queue.enqueue(Request(2, 5, 1))
    process.house_queue.enqueue(Request(1, 3, 1))
    process.fence_queue.enqueue(Request(2, 7))
    thief.leave_critical_sections()

    assert process.house_queue.is_empty()
    assert process.fence_queue.is_empty()
    message, source = network.receive(1, timeout=1)
    assert message.type is MessageType.ACK
    assert message.lamport_clock == process.lamport_clock
    assert message.house_id == -1 and source == 0
    to_two = [network.receive(2, timeout=1)[0] for _ in range(2)]
    assert all(m.type is MessageType.ACK for m in to_two)
    with pytest.raises(TimeoutError):
        network.receive(1, timeout=0.02)


def test_thief_rejects_no_houses():
    network = Network(1)
    process = Process(0)
    comm = Communicator(process, network, Logger(io.StringIO()))
    with pytest.raises(ValueError):
        Thief(process, comm, 0, 1, 1, None, None)


@mock.patch("time.sleep", lambda seconds: None)
def test_simulation_completes(tmp_path):
    stream = io.StringIO()
    processes = run_simulation(3, 2, 1, 2, tmp_path / "logs", stream)
    assert [p.rank for p in processes] == [0, 1, 2]
    assert all(p.houses_visited_count == 2 for p in processes)
    assert all(p.state is ProcessState.RESTING for p in processes)
    assert all(p.house_queue.is_empty() and p.fence_queue.is_empty() for p in processes)
    for rank in range(3):
        content = (tmp_path / "logs" / f"log_{rank}.txt").read_text()
        assert f"[P{rank}]" in content
        assert "FINISHED job 2" in content
    assert stream.getvalue().endswith("All processes completed their work\n")


@mock.patch("time.sleep", lambda seconds: None)
def test_simulation_more_fences_than_thieves(tmp_path):
    processes = run_simulation(2, 1, 5, 1, tmp_path, io.StringIO())
    assert all(p.houses_visited_count == 1 for p in processes)


def test_simulation_rejects_bad_arguments(tmp_path):
    with pytest.raises(ValueError):
        run_simulation(0, 1, 1, 1, tmp_path, io.StringIO())
    with pytest.raises(ValueError):
        run_simulation(2, 1, 1, -1, tmp_path, io.StringIO())