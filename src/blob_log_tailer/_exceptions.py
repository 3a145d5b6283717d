class BlobLogTailerError(Exception):
    """Base class for all errors raised by the blob log tailer."""


class TransientStoreError(BlobLogTailerError):
    """
    A listing or range read against the object store failed (network error, timeout, throttling).

    The affected prefix or object is abandoned for the current cycle and retried on the next one.
    """


class MalformedRecordError(BlobLogTailerError):
    """A single log line could not be mapped onto its schema; only that line is dropped."""


class SinkDeliveryError(BlobLogTailerError):
    """The downstream sink rejected an event; the object's byte range is retried on the next cycle."""
