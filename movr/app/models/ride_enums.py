"""
Ride lifecycle enumerations.
"""

import enum


class VehicleState(str, enum.Enum):
    """Vehicle availability, derived from ``Vehicle.in_use``."""
    AVAILABLE = "AVAILABLE"  # Can be checked out or ridden
    IN_USE = "IN_USE"  # Checked out or on an active ride


class RideState(str, enum.Enum):
    """State of a ride row. Before a ride starts there is no row at all."""
    ACTIVE = "ACTIVE"  # Started, end_ts is null
    ENDED = "ENDED"  # Terminal; a new ride is a new row
