# All comments in English

import threading
from dataclasses import dataclass, fields
from typing import FrozenSet, Set

import numpy as np

from .errors import MalformedInputRecord

DIMENSIONS = ("storage", "compute", "uplink", "downlink")


@dataclass(frozen=True)
class Resources:
    """One value per resource dimension (storage, compute, uplink, downlink)."""
    storage: float = 0.0
    compute: float = 0.0
    uplink: float = 0.0
    downlink: float = 0.0

    def __add__(self, other):
        return Resources(*(a + b for a, b in zip(self, other)))

    def __sub__(self, other):
        return Resources(*(a - b for a, b in zip(self, other)))

    def __iter__(self):
        return iter(getattr(self, f.name) for f in fields(self))

    def floor_zero(self):
        return Resources(*(max(0.0, v) for v in self))

    def fits_in(self, other, eps=0.0):
        return all(a <= b + eps for a, b in zip(self, other))

    def is_negative(self):
        return any(v < 0 for v in self)

    def as_array(self):
        return np.array(list(self), dtype=float)

    def as_dict(self):
        return dict(zip(DIMENSIONS, self))


ZERO = Resources()


@dataclass(frozen=True)
class ServiceModule:
    """A placement unit. Uplink/downlink default to 0 (datasets only give cpu/memory)."""
    name: str
    storage: float
    compute: float
    cost: float = 0.0
    latency: float = 0.0
    uplink: float = 0.0
    downlink: float = 0.0

    def __post_init__(self):
        if self.requirements.is_negative():
            raise MalformedInputRecord(f"Service {self.name!r} has negative requirements")

    @property
    def requirements(self):
        return Resources(self.storage, self.compute, self.uplink, self.downlink)


@dataclass(frozen=True)
class CommDemand:
    """Bandwidth needed between service_a and service_b (by name)."""
    service_a: str
    service_b: str
    bandwidth: float

    def __post_init__(self):
        if self.bandwidth < 0:
            raise MalformedInputRecord(
                f"Demand {self.service_a}->{self.service_b} has negative bandwidth")


class ResourceNode:
    """
    A capacity-bounded execution location.

    Usage is only mutated through reserve/release/deploy/undeploy/reset,
    all of them serialized by a per-node lock. A reservation either fully
    applies or does not apply at all; releases floor every dimension at 0.
    """

    def __init__(self, name, storage, compute, uplink=0.0, downlink=0.0):
        self.name = str(name)
        self._capacity = Resources(float(storage), float(compute), float(uplink), float(downlink))
        if self._capacity.is_negative():
            raise MalformedInputRecord(f"Node {self.name!r} has negative capacity")
        self._usage = ZERO
        self._hosted: Set[str] = set()
        self._lock = threading.Lock()

    # ------------------------- read accessors -------------------------
    @property
    def capacity(self) -> Resources:
        return self._capacity

    @property
    def usage(self) -> Resources:
        return self._usage

    @property
    def remaining(self) -> Resources:
        return (self._capacity - self._usage).floor_zero()

    @property
    def hosted(self) -> FrozenSet[str]:
        return frozenset(self._hosted)

    def can_host(self, req: Resources) -> bool:
        return (self._usage + req).fits_in(self._capacity)

    def load(self) -> float:
        """Highest utilization ratio over the dimensions with non-zero capacity."""
        ratios = [u / c for u, c in zip(self._usage, self._capacity) if c > 0]
        return max(ratios, default=0.0)

    # ------------------------- mutation -------------------------
    def reserve(self, req: Resources) -> bool:
        with self._lock:
            new_usage = self._usage + req
            if not new_usage.fits_in(self._capacity):
                return False
            self._usage = new_usage
            return True

    def release(self, req: Resources) -> None:
        with self._lock:
            self._usage = (self._usage - req).floor_zero()

    def deploy(self, service: ServiceModule) -> bool:
        """Reserve a service's requirements and remember it as hosted here."""
        with self._lock:
            if service.name in self._hosted:
                return True
            new_usage = self._usage + service.requirements
            if not new_usage.fits_in(self._capacity):
                return False
            self._usage = new_usage
            self._hosted.add(service.name)
            return True

    def undeploy(self, service: ServiceModule) -> bool:
        # Releasing a service that is not hosted is a no-op
        with self._lock:
            if service.name not in self._hosted:
                return False
            self._hosted.discard(service.name)
            self._usage = (self._usage - service.requirements).floor_zero()
            return True

    def reset(self) -> None:
        with self._lock:
            self._usage = ZERO
            self._hosted.clear()

    def __repr__(self):
        return f"<ResourceNode {self.name} usage={tuple(self._usage)} cap={tuple(self._capacity)}>"
