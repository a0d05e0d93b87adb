"""
DTOs de los webhooks de esa.

Cuatro variantes discriminadas por `kind`:
- post_create / post_archive: post completo
- post_update: post completo + diff_url
- post_delete: post reducido (sin cuerpo)
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


POST_CREATE = "post_create"
POST_UPDATE = "post_update"
POST_ARCHIVE = "post_archive"
POST_DELETE = "post_delete"

PAYLOAD_KINDS = (POST_CREATE, POST_UPDATE, POST_ARCHIVE, POST_DELETE)


class _WebhookModel(BaseModel):
    """esa puede agregar campos nuevos: se ignoran."""
    model_config = ConfigDict(extra="ignore", frozen=True)


class TeamDTO(_WebhookModel):
    name: str


class ThumbDTO(_WebhookModel):
    url: str


class IconDTO(_WebhookModel):
    url: str
    thumb_s: Optional[ThumbDTO] = None
    thumb_ms: Optional[ThumbDTO] = None
    thumb_m: Optional[ThumbDTO] = None
    thumb_l: Optional[ThumbDTO] = None


class UserDTO(_WebhookModel):
    screen_name: str
    name: str = ""
    icon: Optional[IconDTO] = None


class DeletedPostDTO(_WebhookModel):
    number: int
    name: str
    wip: bool = False


class PostDTO(DeletedPostDTO):
    body_md: str = ""
    body_html: str = ""
    message: str = ""
    url: str = ""


class PostWithDiffDTO(PostDTO):
    diff_url: str = ""


class PostCreatePayload(_WebhookModel):
    kind: Literal["post_create"]
    team: TeamDTO
    post: PostDTO
    user: UserDTO


class PostUpdatePayload(_WebhookModel):
    kind: Literal["post_update"]
    team: TeamDTO
    post: PostWithDiffDTO
    user: UserDTO


class PostArchivePayload(_WebhookModel):
    kind: Literal["post_archive"]
    team: TeamDTO
    post: PostDTO
    user: UserDTO


class PostDeletePayload(_WebhookModel):
    kind: Literal["post_delete"]
    team: TeamDTO
    post: DeletedPostDTO
    user: UserDTO


EsaWebhookPayload = Annotated[
    Union[PostCreatePayload, PostUpdatePayload, PostArchivePayload, PostDeletePayload],
    Field(discriminator="kind"),
]
