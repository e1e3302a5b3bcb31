"""Handler normalization.

Reduces every supported user-function shape to the one
``(request, response, next)`` handler the router runs.
"""

from typing import assert_never

from funcframe._internal.types import NormalizedHandler, UserFunction
from funcframe.events.cloudevent import wrap_cloud_event_function
from funcframe.events.legacy import wrap_event_function
from funcframe.signature import SignatureType


def normalize_handler(user_function: UserFunction, signature_type: SignatureType) -> NormalizedHandler:
    """Return the normalized handler for *user_function*.

    HTTP functions already have the canonical shape and are returned
    unchanged. Event and CloudEvent functions are wrapped by their
    adapters. Nothing is validated here: a malformed function fails when
    it is first invoked.
    """
    match signature_type:
        case SignatureType.HTTP:
            return user_function
        case SignatureType.EVENT:
            return wrap_event_function(user_function)
        case SignatureType.CLOUD_EVENT:
            return wrap_cloud_event_function(user_function)
        case _:
            assert_never(signature_type)
