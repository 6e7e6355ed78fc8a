from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

# attribute name -> query key, in the order the query string is written
LIST_PARAM_KEYS: dict[str, str] = {
    "user_nm": "userNm",
    "material_nm": "materialNm",
    "tag_nm": "tagNm",
    "event_nm": "eventNm",
    "event_id": "eventId",
    "award_nm": "awardNm",
    "prototype_id": "prototypeId",
    "status": "status",
    "limit": "limit",
    "offset": "offset",
}

_QUERY_TO_ATTR = {v: k for k, v in LIST_PARAM_KEYS.items()}


@dataclass(frozen=True)
class ListPrototypesParams:
    """Filters accepted by ``/prototype/list`` and ``/prototype/list/tsv``.

    Every field is optional. ``None`` means "not sent".
    """

    user_nm: str | None = None
    material_nm: str | None = None
    tag_nm: str | None = None
    event_nm: str | None = None
    event_id: int | None = None
    award_nm: str | None = None
    prototype_id: int | None = None
    status: int | bool | None = None
    limit: int | None = None
    offset: int | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ListPrototypesParams":
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            attr = _QUERY_TO_ATTR.get(key, key)
            if attr not in known:
                raise TypeError(f"unknown list parameter: {key!r}")
            kwargs[attr] = value
        return cls(**kwargs)


ParamsLike = ListPrototypesParams | Mapping[str, Any] | None


def format_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def serialize_list_params(params: ParamsLike) -> list[tuple[str, str]]:
    if params is None:
        return []
    if not isinstance(params, ListPrototypesParams):
        params = ListPrototypesParams.from_mapping(params)

    out: list[tuple[str, str]] = []
    for attr, key in LIST_PARAM_KEYS.items():
        value = getattr(params, attr)
        if value is None:
            continue
        out.append((key, format_param(value)))
    return out
