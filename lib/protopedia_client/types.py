"""Response shapes of the ProtoPedia API v2.

These describe what the API has been observed to return, not a published
schema, and may drift when the upstream changes. The client never validates
them.
"""
from __future__ import annotations

from typing import NotRequired, TypedDict


class ResponseMetadata(TypedDict):
    status: int
    title: str
    detail: str


class SelfLink(TypedDict):
    href: str


class ResponseLinks(TypedDict):
    self: SelfLink


class PrototypeRecord(TypedDict):
    id: int
    uuid: str
    nid: NotRequired[str]

    createId: NotRequired[int]
    createDate: str
    updateId: NotRequired[int]
    updateDate: str
    releaseDate: NotRequired[str]

    summary: NotRequired[str]
    tags: NotRequired[str]

    teamNm: NotRequired[str]
    users: NotRequired[str]

    status: int
    releaseFlg: int

    revision: int
    prototypeNm: str
    freeComment: NotRequired[str]
    systemDescription: NotRequired[str]
    videoUrl: NotRequired[str]
    mainUrl: str

    awards: NotRequired[str]

    viewCount: int
    goodCount: int
    commentCount: int

    relatedLink: NotRequired[str]
    relatedLink2: NotRequired[str]
    relatedLink3: NotRequired[str]
    relatedLink4: NotRequired[str]
    relatedLink5: NotRequired[str]

    licenseType: int
    thanksFlg: NotRequired[int]

    events: NotRequired[str]
    officialLink: NotRequired[str]
    materials: NotRequired[str]

    slideMode: NotRequired[int]


class ListPrototypesResponse(TypedDict):
    metadata: ResponseMetadata
    count: int
    links: ResponseLinks
    # absent, not empty, when count is 0
    results: NotRequired[list[PrototypeRecord]]
