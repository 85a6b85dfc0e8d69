"""src/courier/utils/timing.py

Timeouts configuration.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass
class Timeout:
    """
    Timeout configuration.

    Attributes:
        connect: Maximum time to wait for connection establishment (socket connect).
        read: Maximum time to wait for data to be received (socket recv).
        total: Fallback used when ``connect`` or ``read`` is unset.
    """

    connect: Optional[float] = None
    read: Optional[float] = None
    total: Optional[float] = None

    @classmethod
    def from_float(cls, timeout: Optional[float]) -> "Timeout":
        """Create a Timeout instance from a single float (total timeout fallback)."""
        if timeout is None:
            return cls()
        return cls(connect=timeout, read=timeout, total=timeout)

    @classmethod
    def coerce(cls, timeout: Union[float, "Timeout", None]) -> "Timeout":
        """Accept either a Timeout or seconds as a float."""
        if isinstance(timeout, Timeout):
            return timeout
        return cls.from_float(timeout)

    def connect_timeout(self) -> Optional[float]:
        """Timeout applied while connecting."""
        return self.connect if self.connect is not None else self.total

    def read_timeout(self) -> Optional[float]:
        """Timeout applied to each read and write once connected."""
        return self.read if self.read is not None else self.total
