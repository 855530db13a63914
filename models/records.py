"""Typed records decoded from CCU XML-API responses.

Each record is an immutable snapshot of one XML element. Field names follow
the XML attribute names, except where the attribute clashes with something
more general (``config`` -> ``config_pending``).
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class DataPoint:
    """A single readable/writable value on a channel."""
    name: str = ''
    type: str = ''
    ise_id: str = ''
    value: str = ''
    value_type: int = 0
    value_unit: str = ''
    timestamp: int = 0


@dataclass(frozen=True)
class Channel:
    """A device channel and its data points."""
    name: str = ''
    type: str = ''
    address: str = ''
    ise_id: str = ''
    direction: str = ''
    parent_type: str = ''
    index: int = 0
    group_partner: str = ''
    aes_available: bool = False
    transmission_mode: str = ''
    visible: bool = False
    ready_config: bool = False
    operate: bool = False
    datapoints: tuple[DataPoint, ...] = ()

    def find_datapoint(self, ise_id: str) -> DataPoint | None:
        for datapoint in self.datapoints:
            if datapoint.ise_id == ise_id:
                return datapoint
        return None


@dataclass(frozen=True)
class MasterValue:
    """A device configuration (MASTER paramset) value."""
    name: str = ''
    value: str = ''


@dataclass(frozen=True)
class Device:
    """A physical or virtual device with its channels."""
    name: str = ''
    address: str = ''
    ise_id: str = ''
    unreach: bool = False
    config_pending: bool = False
    device_type: str = ''
    interface_id: str = ''
    channels: tuple[Channel, ...] = ()
    master_values: tuple[MasterValue, ...] = ()

    def iter_datapoints(self):
        """Yield (channel, datapoint) pairs in document order."""
        for channel in self.channels:
            for datapoint in channel.datapoints:
                yield channel, datapoint


@dataclass(frozen=True)
class Program:
    """A CCU program (automation rule)."""
    id: str = ''
    name: str = ''
    description: str = ''
    info: str = ''
    visible: bool = False
    active: bool = False
    timestamp: int = 0


@dataclass(frozen=True)
class Room:
    """A room and the channels assigned to it."""
    name: str = ''
    ise_id: str = ''
    channels: tuple[Channel, ...] = ()


@dataclass(frozen=True)
class Function:
    """A function (trade) and the channels assigned to it."""
    name: str = ''
    ise_id: str = ''
    channels: tuple[Channel, ...] = ()


@dataclass(frozen=True)
class SystemVariable:
    """A system variable.

    ``min``/``max`` are only set for numeric variables and ``value_name_0``/
    ``value_name_1`` only for logic (two-state) variables, so both are kept
    as the raw strings the CCU sends.
    """
    name: str = ''
    variable: str = ''
    value: str = ''
    value_type: int = 0
    ise_id: str = ''
    min: str = ''
    max: str = ''
    unit: str = ''
    type: str = ''
    subtype: str = ''
    logged: bool = False
    visible: bool = False
    timestamp: int = 0
    value_name_0: str = ''
    value_name_1: str = ''
    value_text: str = ''

    @property
    def has_bounds(self) -> bool:
        return bool(self.min or self.max)

    @property
    def value_names(self) -> list[str]:
        """Enumerated value labels, empty when the variable has none."""
        return [name for name in (self.value_name_0, self.value_name_1) if name]


@dataclass(frozen=True)
class DeviceType:
    """Reference entry from the device type list."""
    name: str = ''
    id: str = ''


@dataclass(frozen=True)
class ResultEntry:
    """One child element of a result envelope, e.g. ``<changed id=".."/>``.

    attributes is a read-only view and is left out of the hash.
    """
    tag: str
    attributes: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, 'attributes', MappingProxyType(dict(self.attributes)))


@dataclass(frozen=True)
class ResultEnvelope:
    """Generic response of the mutating endpoints."""
    tag: str
    text: str = ''
    entries: tuple[ResultEntry, ...] = ()

    def entries_named(self, tag: str) -> list[ResultEntry]:
        return [entry for entry in self.entries if entry.tag == tag]

    @property
    def not_found(self) -> bool:
        """True if the CCU reported that a referenced object does not exist."""
        return bool(self.entries_named('not_found'))
