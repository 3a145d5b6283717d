from ._helpers import CollectingEventSink, InMemoryObjectStore

__all__ = ["CollectingEventSink", "InMemoryObjectStore"]
