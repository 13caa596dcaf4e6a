"""Streaming response that always closes its body iterator."""

from fastapi.responses import StreamingResponse


class ClosingStreamingResponse(StreamingResponse):
    """
    StreamingResponse that closes the body iterator when sending ends.

    Starlette cancels the send loop on client disconnect but leaves an async
    generator body suspended at its `yield`. Closing it here unwinds the emit
    session right away instead of whenever the generator is collected.
    """

    async def __call__(self, scope, receive, send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            aclose = getattr(self.body_iterator, "aclose", None)
            if aclose is not None:
                await aclose()
