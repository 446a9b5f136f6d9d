from abc import ABC, abstractmethod


class OutputSink(ABC):
    """Destination for the rendered document.

    A sink receives the complete payload in one call. It either delivers all of
    it or raises DeliveryError; it never falls back to another destination.
    """

    name: str = ""

    @abstractmethod
    def deliver(self, payload: str) -> None:
        """Deliver the payload.

        Args:
            payload: The complete rendered document.

        Raises:
            DeliveryError: If the destination cannot accept the payload.
        """
        pass

    def describe(self) -> str:
        """Short confirmation shown to the user after a successful delivery."""
        return f"Output written to {self.name}."
