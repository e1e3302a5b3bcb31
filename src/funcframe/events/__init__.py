"""Event adapters — turn event and CloudEvent functions into HTTP handlers.

    wrap_event_function       -- ``fn(data, context[, callback])``
    wrap_cloud_event_function -- ``fn(cloud_event[, callback])``
"""

from funcframe.events.cloudevent import CloudEvent, wrap_cloud_event_function
from funcframe.events.legacy import Context, wrap_event_function

__all__ = [
    "CloudEvent",
    "Context",
    "wrap_cloud_event_function",
    "wrap_event_function",
]
