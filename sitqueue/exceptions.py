class SitQueueError(Exception):
    """Base error for the offline queue"""


class ImproperlyConfigured(SitQueueError):
    pass


class NotInitializedError(SitQueueError):
    """The queue was used before `initialize()` completed"""


class PayloadError(SitQueueError):
    """Binary payload I/O failed"""


class PayloadWriteError(PayloadError):
    """The payload could not be stored, the enqueue did not happen"""


class PayloadReadError(PayloadError):
    """A stored payload could not be resolved"""


class QueueStoreError(SitQueueError):
    pass


class QueueWriteError(QueueStoreError):
    """The queue document could not be persisted"""


class ValidationError(SitQueueError):
    pass


class NotAuthenticatedError(ValidationError):
    def __init__(self, message: str = "You must be signed in to do this") -> None:
        super().__init__(message)


class InvalidLocationError(ValidationError):
    def __init__(self, message: str = "Valid location data is required") -> None:
        super().__init__(message)
