"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and HTTP layers can catch them uniformly and display
user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class EmptyCartError(ValidationError):
    """Checkout was attempted with no cart lines."""


class ProductUnavailableError(ValidationError):
    """A catalog item or service add-on is no longer active."""


class InsufficientStockError(ValidationError):
    """A stock-tracked item cannot cover the requested quantity."""


class OrderNotFoundError(EntityNotFoundError):
    """No order exists with the given id."""


class InvalidTransitionError(ValidationError):
    """An order status change is not allowed from the current status."""


class ConcurrentModificationError(DomainException):
    """A record changed underneath us between read and commit."""


class WebhookSignatureError(DomainException):
    """An inbound gateway event failed signature or payload verification."""


class PaymentGatewayError(DomainException):
    """The external payment gateway rejected or failed a request."""


class NotificationDeliveryError(DomainException):
    """A single notification message could not be delivered."""
