# dumbthieves

A simulation of a group of thieves who each pick a house to rob and then
need one of a limited number of fences to sell the loot. Every thief runs
in its own thread and coordinates with the others only by exchanging
messages stamped with Lamport clocks: a thief enters a house once every
other thief has acknowledged its request, and takes a fence once
`num_processes - num_fences` acknowledgements have come in. Requests that a
thief cannot grant yet are kept in a queue and acknowledged when it leaves
its critical sections.

## Installing

```
pip install .
```

## Running the simulation

```
dumbthieves <num_houses> <num_fences> [--processes N] [--rounds R] [--log-dir DIR]
```

- `--processes` is the number of thieves (default 4).
- `--rounds` is the number of jobs each thief does; without it the thieves
  keep working until the command is interrupted.
- `--log-dir` is the directory for the per-thief logs (default `logs`).

Each thief's events (selecting a house, sending and receiving requests and
acknowledgements, entering a house, using a fence, finishing a job) are
printed to the terminal and written to `<log-dir>/log_<rank>.txt`; the
directory is created if it is missing. When all rounds are done the line
`All processes completed their work` is printed. Bad arguments print the
usage and make the command exit with status 1.

## Using it from Python

The pieces can be used on their own:

- `dumbthieves.waitqueue.RequestQueue` holds deferred `Request`s ordered by
  Lamport clock, then by rank (16 by default), raises `QueueFullError` past
  its capacity, and offers `enqueue`, `dequeue`, `is_empty` and `drain`.
- `dumbthieves.process.Process` carries a thief's `ProcessState`, Lamport
  clock and acknowledgement count, with `increment_clock`,
  `update_clock_upon_recv`, `add_ack`, `reset_acks` and `wait_for_acks`.
- `dumbthieves.messages.Message` is the fixed-size wire message
  (`MessageType.REQ_HOUSE`, `REQ_FENCE`, `ACK`), with `to_bytes` and
  `Message.from_bytes`.
- `dumbthieves.utils` has `select_house`, `state_to_string`,
  `msg_type_to_string` and `Logger`, which writes each line to a stream and
  a log file.
- `dumbthieves.communication.Network` delivers messages between ranks, and
  `Communicator` sends, broadcasts, receives and answers requests on behalf
  of a thief; `Communicator.listen` runs until a `threading.Event` is set.
- `dumbthieves.logic.Thief` runs the rounds of one thief, and
  `dumbthieves.logic.run_simulation` runs a whole group and returns the
  final `Process` of each thief:

```python
import sys
from dumbthieves.logic import run_simulation

run_simulation(num_processes=4, num_houses=3, num_fences=2, rounds=2,
               log_dir="logs", stream=sys.stdout)
```

## What it does not do

All thieves run as threads inside one Python process and talk through the
in-memory `Network`. The package does not spread thieves over separate
processes or machines, and has no network transport between them.

## Tests

```
pip install ".[test]"
pytest
```