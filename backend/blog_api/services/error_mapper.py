"""
Blog API Backend — Store Fault → API Error Mapper
==================================================

What:  Translates gateway faults into the API error that describes them.
Why:   The gateway reports what went wrong in store terms; clients need a
       stable error surface. Keeping the translation in one function keeps
       the five handlers free of repeated except-chains.
How:   Dispatch is by exception type over the closed StoreFault hierarchy.
       Subclasses are checked before the StoreFault base.

Mapping:
    StoreValidationFault   → StoreValidationError   400 (details = messages)
    IdentifierFormatFault  → InvalidIdentifierError 400
    StoreFault (any other) → ServerError            500 (message = fault text)
"""

import logging

from blog_api.exceptions import (
    BlogApiError,
    IdentifierFormatFault,
    InvalidIdentifierError,
    ServerError,
    StoreFault,
    StoreValidationError,
    StoreValidationFault,
)

logger = logging.getLogger(__name__)


def map_store_fault(fault: StoreFault, operation: str) -> BlogApiError:
    """
    Build the API error for a gateway fault.

    Args:
        fault:     The fault raised by the gateway.
        operation: Handler name, used only for logging.

    Returns:
        The BlogApiError the handler should raise.
    """
    if isinstance(fault, StoreValidationFault):
        logger.warning("%s rejected by store validation: %s", operation, fault.errors)
        return StoreValidationError(details=fault.errors)

    if isinstance(fault, IdentifierFormatFault):
        logger.warning("%s called with malformed id %r", operation, fault.value)
        return InvalidIdentifierError()

    logger.error("%s failed: %s | Context: %s", operation, fault.message, fault.context)
    return ServerError(message=fault.message)
