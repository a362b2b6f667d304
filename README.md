# c300sim

Cycle-level behavioural models of the blocks of a many-core hashing chip,
written as plain Python objects. You drive each model one rising clock edge
at a time with `tick(...)`. Between edges you read its registers and outputs,
which are exposed as attributes and properties. Calling `reset()` applies the
active-low reset.

## Models

- `c300sim.uuid_gen`: the per-core hardware UUID generator.
  - `CoreUUID(core_id)` builds a 128-bit UUID from the core id, fixed chip,
    wafer and process signatures, a timestamp and an LFSR entropy word.
  - Its properties are `uuid`, `valid`, `ready` and `checksum`.
  - Helper functions are `lfsr_next`, `swap_bytes32` and `crc32_bits`, a
    bitwise CRC-32 over 128 bits.
- `c300sim.core_security`: the tamper and side-channel monitor.
  - `CoreSecurity` watches power, voltage, temperature and frequency through
    four `SensorChannel`s. Each channel has a tracking baseline and a
    deviation counter.
  - You pass `SensorReadings` to `tick`. The `outputs` property returns a
    `SecurityOutputs`.
  - `calculate_security_level()` yields a `SecurityLevel`.
- `c300sim.core`: one hashing core.
  - `HashCore(core_id)` runs a four-stage pipeline with a nonce sweep.
    `outputs()` returns a `CoreOutputs`.
  - `HashCore` contains a `CoreUUID` and a `CoreSecurity`.
  - Its mixing functions are `sha256_round`, which XORs each 32-bit word with
    a key and rotates it left by one, and `sha256_compression`.
- `c300sim.tmr`: triple modular redundancy.
  - `majority_vote` votes bit by bit over 256-bit words, and
    `majority_vote_bool` votes over three booleans.
  - `detect_faults` returns `FaultFlags`.
  - `TMRVoter` registers the vote, and its `outputs()` returns `TMROutputs`.
  - `TMRMonitor` counts errors and reports `critical_failure`.
- `c300sim.engine`: the processing engine.
  - `Engine(engine_id)` is driven with `EngineInputs`. It sweeps nonces,
    keeps a solution and counts cycles and hashes.
  - `status()` returns an 8-bit status word.
  - `check_difficulty` compares `leading_zeros` of a hash with a target.
    The count is held in 8 bits, so an all-zero hash counts as zero leading
    zeros.
- `c300sim.circular_buffer`: `CircularBuffer(size, default)`, a clocked FIFO.
  It has the properties `full`, `empty`, `count` and `data_out`, and it
  supports `len()`.
- `c300sim.scheduler`: `AdaptiveScheduler`.
  - It holds a ring of `WorkItem`s and assigns them to cores described by
    `CoreStatus`.
  - The algorithm it uses is a `SchedulerAlgorithm`: round robin,
    load-balanced, priority-based or performance-aware. It switches algorithm
    on the basis of core utilisation and the boost and power-save flags.
- `c300sim.controller`: `Controller`, driven with `ControllerInputs`.
  - It manages the `PowerState`.
  - It distributes work to the selected core.
  - It collects results from the cores in round-robin order, with a
    handshake.
  - `performance()` updates the activity counters.
- `c300sim.network_qos`: network quality of service.
  - `NetworkQoS` checks each incoming `Packet` with
    `validate_packet_security`, which uses `packet_hash`.
  - It queues packets by `QoSPriority` and sends one per edge by weighted
    round robin, as set in `QoSConfig`.
  - It tracks `QoSStatistics` and flags congestion.
  - `QoSController` aggregates several `NetworkQoS` units.

## Example

```python
from c300sim.circular_buffer import CircularBuffer
from c300sim.tmr import majority_vote
from c300sim.uuid_gen import CoreUUID
from c300sim.network_qos import NetworkQoS, Packet, QoSPriority, packet_hash

buf = CircularBuffer(4, 0)
buf.tick(True, False, 7)
assert buf.count == 1 and buf.data_out == 7

assert majority_vote(0b1100, 0b1010, 0b1001) == 0b1000

gen = CoreUUID(5)
gen.tick()          # entropy source becomes ready
gen.tick()          # UUID is generated
assert gen.valid and gen.uuid & 0xFF == 5

payload = b"abc"
packet = Packet(
    src_core_id=1,
    packet_size=len(payload),
    priority=QoSPriority.HIGH,
    security_hash=packet_hash(payload).to_bytes(4, "little"),
    payload=payload,
    valid=True,
)
qos = NetworkQoS()
assert qos.tick(packet=packet) is packet
assert qos.statistics.bytes_transmitted == 3
```

## What the package does not do

- There is no simulation kernel that wires the models together. Each model
  takes the outputs of its neighbours as plain arguments:
  - `EngineInputs` carries the hash pipeline and self-test results.
  - `ControllerInputs` carries the arbiter and scheduler outputs.
- The package provides no hash pipeline, self-test, work arbiter or
  QoS-manager model.
- The core's mixing functions are not a real SHA-256.
- The package has no command-line tool.

## Tests

```
pip install -e .[test]
pytest
```