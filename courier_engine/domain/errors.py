"""Domain errors for courier assignment.

Only the terminal errors (NoCourierAvailableError, OverrideNotAllowedError,
CourierAlreadyAssignedError, UnknownOrderStatusError,
ConcurrencyConflictError and the lookup failures) ever leave the engine.
NoMatchError and CourierIneligibleError are raised and absorbed inside the
rule-matching walk.
"""


class CourierAssignmentError(Exception):
    """Base class for every courier assignment failure."""


class NoMatchError(CourierAssignmentError):
    """No active rule matched the order; triggers the default-carrier fallback."""


class CourierIneligibleError(CourierAssignmentError):
    """A specific carrier failed the eligibility check for an order."""

    def __init__(self, carrier_code: str, reason: str):
        super().__init__(f"Courier {carrier_code} is not eligible: {reason}")
        self.carrier_code = carrier_code
        self.reason = reason


class NoCourierAvailableError(CourierAssignmentError):
    """Neither a rule nor a default carrier could serve the order."""


class OverrideNotAllowedError(CourierAssignmentError):
    """Manual reassignment attempted once the courier is locked."""


class ConcurrencyConflictError(CourierAssignmentError):
    """The order changed between the override check and the snapshot write."""


class OrderNotFoundError(CourierAssignmentError):
    pass


class CarrierNotFoundError(CourierAssignmentError):
    pass


class CourierAlreadyAssignedError(CourierAssignmentError):
    """Automatic assignment requested for an order that already has a courier."""


class UnknownOrderStatusError(CourierAssignmentError):
    """A stored order status the courier lifecycle does not recognise."""

    def __init__(self, order_id: str, status: str):
        super().__init__(f"Order {order_id} has unrecognised status {status!r}")
        self.order_id = order_id
        self.status = status
