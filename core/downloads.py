from urllib.parse import quote

from starlette.responses import Response

from models.interfaces.download_interface import IFileDownload


def content_disposition(filename: str) -> str:
    """Attachment header value that survives non-ASCII names and quotes."""
    quoted = quote(filename)
    if quoted == filename:
        return f'attachment; filename="{filename}"'
    fallback = filename.encode("ascii", "ignore").decode("ascii").replace('"', "").replace("\\", "")
    return f"attachment; filename=\"{fallback or 'download'}\"; filename*=utf-8''{quoted}"


class ResponseDownload(IFileDownload):
    """Captures delivered content as an HTTP attachment response."""

    def __init__(self):
        self.response: Response | None = None

    def deliver(self, content: str, filename: str, mime_type: str) -> None:
        self.response = Response(
            content=content,
            media_type=mime_type,
            headers={"Content-Disposition": content_disposition(filename)},
        )
