"""Function signature types.

The calling convention a user function follows. Fixed when the function's
routes are registered and never changed afterwards.
"""

from enum import Enum

from funcframe.errors import ConfigurationError


class SignatureType(Enum):
    """The calling-convention family of a user function.

    - ``HTTP``: ``fn(request, response, next)``
    - ``EVENT``: ``fn(data, context)`` or ``fn(data, context, callback)``
    - ``CLOUD_EVENT``: ``fn(cloud_event)`` or ``fn(cloud_event, callback)``
    """

    HTTP = "http"
    EVENT = "event"
    CLOUD_EVENT = "cloudevent"

    @classmethod
    def parse(cls, value: "SignatureType | str") -> "SignatureType":
        """Resolve a member, its value, or its name (case-insensitive).

        ``"cloudevent"``, ``"cloud_event"`` and ``"CLOUD_EVENT"`` all map
        to ``CLOUD_EVENT``. Raises ``ConfigurationError`` otherwise.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "_")
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        choices = ", ".join(member.value for member in cls)
        msg = f"Unknown function signature type {value!r}; expected one of: {choices}."
        raise ConfigurationError(msg)
