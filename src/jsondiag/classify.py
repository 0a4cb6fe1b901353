"""
Message classifiers.

Pure predicates that recognise well-known diagnostic message shapes.
All tests are case-sensitive. An absent message matches nothing except
where rendering it says otherwise.
"""

from typing import Any, Sequence

from jsondiag.rendering import render_value

SERVICE_REQUEST_MESSAGE = "Service request"
TIMEOUT_MARKERS = ("4 DEADLINE_EXCEEDED", "14 UNAVAILABLE")
ASYNC_ATTRIBUTE_MARKER = "before async attributes settled"
REGISTERED_GLOBAL_MARKER = "Registered a global"
INCOMING_REQUEST_MARKER = "incomingRequest"


def _contains(message: Any, needle: str) -> bool:
    return isinstance(message, str) and needle in message


def is_service_request_error(message: Any) -> bool:
    return isinstance(message, str) and message == SERVICE_REQUEST_MESSAGE


def is_timeout(message: Any) -> bool:
    """
    Check for gRPC timeout/unavailable status text.

    The message is rendered first, so status text nested inside
    non-string messages (error objects, dicts) is found too.
    """
    rendered = render_value(message)
    return any(marker in rendered for marker in TIMEOUT_MARKERS)


def is_async_attribute_error(message: Any) -> bool:
    return _contains(message, ASYNC_ATTRIBUTE_MARKER)


def is_registered_global_message(message: Any) -> bool:
    return _contains(message, REGISTERED_GLOBAL_MARKER)


def is_incoming_request_marker(arguments: Sequence[Any]) -> bool:
    """True if the only argument is a string mentioning ``incomingRequest``."""
    return (
        len(arguments) == 1
        and isinstance(arguments[0], str)
        and INCOMING_REQUEST_MARKER in arguments[0]
    )
