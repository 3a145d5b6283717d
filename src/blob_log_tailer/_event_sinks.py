from typing import Protocol, TextIO

from ._exceptions import SinkDeliveryError
from ._models import Event


class EventSink(Protocol):
    """
    The downstream receiver of finished events.

    `push` is fire-and-forget per event; implementations signal a failed delivery by raising `SinkDeliveryError`.
    """

    def push(self, event: Event) -> None: ...


class JsonLinesEventSink:
    def __init__(self, *, io: TextIO):
        """
        Write each event as a single line of JSON to a text stream.

        Parameters
        ----------
        io : text stream
            An open, writable text stream (a file or sys.stdout).
            The stream is flushed after every event so that downstream readers see events as they are produced.
        """
        self.io = io

    def push(self, event: Event) -> None:
        try:
            self.io.write(f"{event.to_json()}\n")
            self.io.flush()
        except (OSError, ValueError) as exception:
            raise SinkDeliveryError(f"Unable to write event from '{event.source}' to the output stream!") from exception
