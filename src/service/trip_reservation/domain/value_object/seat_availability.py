import attrs


@attrs.frozen
class SeatAvailability:
    """Outcome of an availability check; `available` is the bottleneck over the affected legs"""

    ok: bool
    available: int
    requested: int
