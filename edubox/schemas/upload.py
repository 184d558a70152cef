from edubox.schemas.base import CamelModel


class UploadRequest(CamelModel):
    filename: str | None = None
    content_type: str | None = None
    data: str | None = None  # data URL ("data:<mime>;base64,...") or raw base64


class UploadResponse(CamelModel):
    url: str
