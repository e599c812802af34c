"""
File responses that run a callback once the transfer is over.

Starlette's ``background`` task only runs after a successful send; a client
that disconnects mid-stream would leave the job's files behind. The callback
here runs in a ``finally`` around the whole transfer and receives the
exception that interrupted it, if any.
"""

from typing import Callable, Optional

from fastapi.responses import FileResponse
from starlette.types import Receive, Scope, Send

from ..core import get_logger

logger = get_logger(__name__, component="responses")

TransferCallback = Callable[[Optional[BaseException]], object]


class CleanupFileResponse(FileResponse):
    """FileResponse that calls ``on_complete(error)`` after streaming"""

    def __init__(self, path, *, on_complete: TransferCallback, **kwargs):
        super().__init__(path, **kwargs)
        self.on_complete = on_complete

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        error: Optional[BaseException] = None
        try:
            await super().__call__(scope, receive, send)
        except BaseException as exc:
            error = exc
            raise
        finally:
            try:
                self.on_complete(error)
            except Exception as cleanup_error:
                logger.error("Post-transfer cleanup failed", extra={
                    "error": str(cleanup_error),
                }, exc_info=True)
