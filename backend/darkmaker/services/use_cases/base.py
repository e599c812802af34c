"""
Base use case class.

Each use case wraps one business operation behind an ``execute`` method with
explicit request/response objects, independent of HTTP. Routes build the
request, call ``execute`` and translate the outcome into a response; the
same use case can be driven from a script or a test without a server.

Example:
    >>> use_case = TranscribeUploadUseCase(gateway, workspace)
    >>> response = await use_case.execute(request)
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class UseCase(ABC, Generic[RequestT, ResponseT]):
    """
    Base use case abstract class.

    Type Parameters:
        RequestT: Type of the input request object
        ResponseT: Type of the output response object
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        """
        Execute the use case and return a response.

        Raises:
            Errors from darkmaker.core.exceptions. HTTP exceptions are never
            raised here; converting errors to HTTP responses is the route's job.
        """
        pass
