"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the cart manager can catch them at its operation boundary and turn them
into a user-facing message instead of a hard failure.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class CartError(DomainException):
    """Base class for failures of a cart operation."""


class NoOrderError(CartError):
    """The operation needs a cart-status order, but none is bound."""


class EntityNotFoundError(CartError):
    """A requested purchasable or line item does not exist."""


class NotPurchasableError(CartError):
    """The purchasability check rejected the actor/quantity combination."""


class InvalidStateError(CartError):
    """An order that is not in cart status was bound as the current cart."""


class HookAbortedError(CartError):
    """A registered hook observer vetoed the operation."""


class NoCartFoundError(CartError):
    """A clear was requested but no cart was bound to the session."""
