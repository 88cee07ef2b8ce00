"""Base interface for anything that can turn a request into images."""

from abc import ABC, abstractmethod

from .models import GenerationRequest


class ImageGenerator(ABC):
    """A single suspending call to a remote image backend.

    Implementations return the generated images as data URLs, in the order
    the backend produced them, and raise a
    :class:`~nanostudio.core.errors.StudioError` subclass on failure.  They
    never retry.
    """

    name: str = "base"

    @abstractmethod
    async def generate_images(self, request: GenerationRequest) -> list[str]:
        """Run one generation call.

        Args:
            request: The validated generation request.

        Returns:
            One data URL per generated image.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
