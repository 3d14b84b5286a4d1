"""
Global identifiers for stored models: `gid://<app>/<Model>/<id>`.

    gid = post.to_global_id()               # GlobalId('fast-app', 'Post', '65f...')
    str(gid)                                # 'gid://fast-app/Post/65f...'
    await Locator().locate(str(gid))        # -> Post instance
    await Locator().locate_many([gid_a, gid_b], ignore_missing=True)
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional, TYPE_CHECKING
from urllib.parse import quote, unquote

from bson import ObjectId

from fast_model_i18n.exceptions.global_id_exceptions import GlobalIdAppMismatchException, InvalidGlobalIdException
from fast_model_i18n.exceptions.model_exceptions import ModelNotFoundException
from fast_model_i18n.utils.model_resolver import resolve_model_from_name

if TYPE_CHECKING:
    from fast_model_i18n.contracts.model import Model


_GID_PATTERN = re.compile(r"^gid://(?P<app>[^/]+)/(?P<model>[A-Za-z_][\w.]*)/(?P<id>[^/]+)$")


@dataclass(frozen=True)
class GlobalId:
    app: str
    model_name: str
    model_id: str

    def __str__(self) -> str:
        return f"gid://{self.app}/{self.model_name}/{quote(str(self.model_id), safe='')}"

    @property
    def uri(self) -> str:
        return str(self)

    @classmethod
    def parse(cls, value: 'GlobalId | str') -> 'GlobalId':
        if isinstance(value, GlobalId):
            return value
        if not isinstance(value, str):
            raise InvalidGlobalIdException(repr(value), "not a string")

        match = _GID_PATTERN.match(value.strip())
        if not match:
            raise InvalidGlobalIdException(value)
        return cls(match["app"], match["model"], unquote(match["id"]))

    def to_param(self) -> str:
        return base64.urlsafe_b64encode(str(self).encode("utf-8")).decode("ascii").rstrip("=")

    @classmethod
    def from_param(cls, param: str) -> 'GlobalId':
        padded = param + "=" * (-len(param) % 4)
        try:
            decoded = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
        except (binascii.Error, UnicodeError, ValueError):
            raise InvalidGlobalIdException(param, "not a global id param") from None
        return cls.parse(decoded)

    def model_class(self, module_hint: Optional[str] = None) -> type['Model']:
        try:
            return resolve_model_from_name(self.model_name, module_hint=module_hint)
        except ValueError:
            raise InvalidGlobalIdException(str(self), f"unknown model `{self.model_name}`") from None

    def coerced_id(self) -> Any:
        return coerce_model_id(self.model_id)


def coerce_model_id(value: Any) -> Any:
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


class Locator:
    """
    Finds the records global ids point to.

    Args:
        app: Only accept global ids of this app (any app when None).
        module_hint: Module to import model classes from when they are not loaded yet.
    """

    def __init__(self, app: Optional[str] = None, module_hint: Optional[str] = None) -> None:
        self.app = app
        self.module_hint = module_hint

    def _parse(self, value: 'GlobalId | str', only: Optional[Iterable[type]] = None) -> tuple[GlobalId, type['Model']]:
        gid = GlobalId.parse(value)
        if self.app and gid.app != self.app:
            raise GlobalIdAppMismatchException(self.app, gid.app)

        model_cls = gid.model_class(self.module_hint)
        if only is not None and not any(issubclass(model_cls, allowed) for allowed in only):
            raise InvalidGlobalIdException(str(gid), f"model `{gid.model_name}` not allowed")
        return gid, model_cls

    async def locate(self, value: 'GlobalId | str', *, only: Optional[Iterable[type]] = None) -> 'Model':
        gid, model_cls = self._parse(value, only)
        return await model_cls.find_or_fail({"_id": gid.coerced_id()})

    async def locate_many(
        self,
        values: Iterable['GlobalId | str'],
        *,
        ignore_missing: bool = False,
        only: Optional[Iterable[type]] = None,
    ) -> list['Model']:
        """
        Locate several records with one query per model class.

        Results follow the order of `values`. Missing records raise
        `ModelNotFoundException` unless `ignore_missing` is set, in which case
        they are left out.
        """
        requested: list[tuple[type['Model'], Any]] = []
        ids_by_model: dict[type['Model'], list[Any]] = {}
        for value in values:
            gid, model_cls = self._parse(value, only)
            model_id = gid.coerced_id()
            requested.append((model_cls, model_id))
            ids = ids_by_model.setdefault(model_cls, [])
            if model_id not in ids:
                ids.append(model_id)

        found: dict[tuple[type['Model'], Any], 'Model'] = {}
        for model_cls, ids in ids_by_model.items():
            records = await model_cls.find({"_id": {"$in": ids}})
            for record in records:
                found[(model_cls, record.id)] = record

            missing = [model_id for model_id in ids if (model_cls, model_id) not in found]
            if missing:
                if not ignore_missing:
                    raise ModelNotFoundException(model_cls.__name__, missing)
                logging.debug(f"Skipping {len(missing)} missing {model_cls.__name__} record(s)")

        return [found[key] for key in requested if key in found]


__all__ = [
    "GlobalId",
    "Locator",
    "coerce_model_id",
]
