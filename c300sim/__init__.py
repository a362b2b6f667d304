"""Cycle-level behavioural models of a many-core hashing chip: UUID, security, core, TMR, engine, buffer, scheduler, controller and network QoS."""

__version__ = "1.0.0"

__all__ = [
    "uuid_gen",
    "core_security",
    "core",
    "tmr",
    "engine",
    "circular_buffer",
    "scheduler",
    "controller",
    "network_qos",
]