from typing import Any

from pydantic import ConfigDict

from edubox.schemas.base import CamelModel


class FileBlob(CamelModel):
    """Client-supplied base64 for a file the server cannot fetch itself."""
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    storage_id: str | None = None
    name: str | None = None
    base64: str | None = None

    @property
    def key(self) -> str | None:
        return self.id or self.storage_id or self.name


class SyncRequest(CamelModel):
    file_blobs: list[FileBlob] | None = None


class GetMappingsRequest(CamelModel):
    user_id: str | None = None  # honoured only for shared-secret callers
    file_ids: list[str] | None = None


class ResourceMapping(CamelModel):
    file_id: str
    nuclia_resource_id: str


class GetMappingsResponse(CamelModel):
    mappings: list[ResourceMapping]


class PersistMappingItem(CamelModel):
    model_config = ConfigDict(extra="allow")

    clerk_id: str | None = None
    file_id: str | None = None
    user_id: str | None = None
    nuclia_resource_id: str | None = None


class PersistMappingRequest(CamelModel):
    mappings: list[PersistMappingItem] | None = None


class PersistMappingResponse(CamelModel):
    ok: bool = True
    updated: int = 0


class UserContextResponse(CamelModel):
    data: dict[str, Any] | None
