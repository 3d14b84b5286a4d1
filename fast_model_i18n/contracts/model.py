from dataclasses import dataclass
from datetime import datetime
from typing import Optional, TypeVar, ClassVar, Any, get_type_hints, get_origin, Self
from typing import TYPE_CHECKING
import inspect

from bson import ObjectId

from fast_model_i18n import config
from fast_model_i18n.core.errors import Errors
from fast_model_i18n.core.localization import __
from fast_model_i18n.core.message_resolver import MessageResolver
from fast_model_i18n.core.mixins.global_identification import GlobalIdentification
from fast_model_i18n.core.mixins.validation_helpers import ValidationHelpers
from fast_model_i18n.database.mongo import get_db
from fast_model_i18n.exceptions.common_exceptions import DatabaseNotInitializedException
from fast_model_i18n.exceptions.model_exceptions import ModelNotFoundException, ModelValidationException
from fast_model_i18n.utils.datetime_utils import now
from fast_model_i18n.utils.serialisation import serialise, pascal_case_to_snake_case, humanize

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection


T = TypeVar('T', bound='Model')

_default_message_resolver = MessageResolver()

_CONTROL_FIELDS = ("protected", "i18n_scope", "message_resolver")


@dataclass
class Model(ValidationHelpers, GlobalIdentification):
    protected: ClassVar[list[str]] = ["_id", "created_at", "updated_at"]

    # Translation namespace: `<scope>.errors.models.<key>...`, `<scope>.attributes.<key>...`
    i18n_scope: ClassVar[str] = config.I18N_SCOPE
    message_resolver: ClassVar[Optional[MessageResolver]] = None

    _cached_model_fields: ClassVar[Optional[dict[str, Any]]] = None
    _cached_fillable_fields: ClassVar[Optional[list[str]]] = None

    _id: Optional[ObjectId] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __init__(self, *args, **kwargs):
        self.clean: dict[str, Any] = {}
        self._errors: Optional[Errors] = None

        is_from_db = '_id' in kwargs and kwargs['_id'] is not None

        for key, value in kwargs.items():
            if key in self.model_fields().keys():
                if is_from_db:
                    super().__setattr__(key, value)
                else:
                    setattr(self, key, value)

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        # Field caches are per class
        cls._cached_model_fields = None
        cls._cached_fillable_fields = None

    def __str__(self):
        return str(self.dict())

    #
    # I18n
    #
    @classmethod
    def i18n_key(cls) -> str:
        return pascal_case_to_snake_case(cls.__name__)

    @classmethod
    def human_attribute_name(cls, attribute: Any) -> str:
        """Localized attribute label from `<scope>.attributes.<model>.<attribute>`, humanized name otherwise."""
        return __(
            f"{cls.i18n_scope}.attributes.{cls.i18n_key()}.{attribute}",
            default=humanize(attribute),
        )

    @classmethod
    def get_message_resolver(cls) -> MessageResolver:
        return cls.message_resolver or _default_message_resolver

    #
    # Validation
    #
    @property
    def errors(self) -> Errors:
        if self._errors is None:
            self._errors = Errors(self)
        return self._errors

    def validate(self) -> Any:
        """Override to run `validates_*` helpers. May be sync or async."""
        return None

    async def is_valid(self) -> bool:
        self.errors.clear()
        result = self.validate()
        if inspect.isawaitable(result):
            await result
        return self.errors.is_empty()

    def is_new(self) -> bool:
        return self._id is None

    def values(self) -> dict[str, Any]:
        """Raw field values set on this instance (fields never assigned are absent)."""
        return {key: self.__dict__[key] for key in self.model_fields().keys() if key in self.__dict__}

    def get_column_value(self, key: str) -> Any:
        return getattr(self, key, None)

    #
    # Persistence
    #
    @classmethod
    def collection_name(cls) -> str:
        return pascal_case_to_snake_case(cls.__name__)

    @classmethod
    async def collection_cls(cls) -> 'AsyncIOMotorCollection':
        db = await get_db()
        if db is None:
            raise DatabaseNotInitializedException()
        return db[cls.collection_name()]

    async def collection(self) -> 'AsyncIOMotorCollection':
        return await self.collection_cls()

    async def save(self, validate: bool = True) -> Self:
        if validate and not await self.is_valid():
            raise ModelValidationException(self.__class__.__name__, self.errors)

        if self._id:
            await self._update()
        else:
            await self._create()
        return self

    @classmethod
    def model_fields(cls) -> dict[str, Any]:
        if cls._cached_model_fields is not None:
            return cls._cached_model_fields

        annotations: dict[str, Any] = {}
        for base in cls.__mro__:
            if hasattr(base, '__annotations__'):
                base_hints = get_type_hints(base)
                for name, hint in base_hints.items():
                    # Skip ClassVar annotations and internal control fields
                    if get_origin(hint) is ClassVar:
                        continue

                    if name in _CONTROL_FIELDS:
                        continue
                    annotations.setdefault(name, hint)

        cls._cached_model_fields = annotations
        return annotations

    @classmethod
    def fillable_fields(cls) -> list[str]:
        if cls._cached_fillable_fields is not None:
            return cls._cached_fillable_fields
        cls._cached_fillable_fields = [f for f in cls.model_fields().keys() if f not in cls.protected]
        return cls._cached_fillable_fields

    async def _update(self) -> None:
        coll = await self.collection()
        query = await self.query_modifier({'_id': self._id}, "update", self.collection_name())
        await coll.update_one(query, {
            "$set": {key: self.get(key) for key in self.clean.keys()},
            "$currentDate": {"updated_at": True},
        })
        await self.refresh()

    async def _create(self) -> None:
        to_insert = {
            **{key: self.get(key) for key in self.fillable_fields()},
            'created_at': self.get('created_at') or now(),
            'updated_at': self.get('updated_at') or now(),
        }
        data = await self.query_modifier(to_insert, "create", self.collection_name())
        coll = await self.collection()
        result = await coll.insert_one(data)
        self._id = result.inserted_id
        await self.refresh()

    @classmethod
    async def create(cls: type[T], data: dict[str, Any]) -> T:
        instance = cls(**data)
        await instance.save()
        return instance

    async def refresh(self) -> Self:
        coll = await self.collection()
        data = await coll.find_one({'_id': self._id})
        if data:
            for key, value in data.items():
                setattr(self, key, value)
            self.clean = {}
        return self

    @classmethod
    async def find(cls: type[T], query: dict[str, Any], **kwargs) -> list[T]:
        final_query = await cls.query_modifier(query, "find", cls.collection_name())
        cursor = (await cls.collection_cls()).find(final_query, **kwargs)
        return [cls(**data) async for data in cursor]

    @classmethod
    async def find_one(cls: type[T], query: dict[str, Any], **kwargs) -> Optional[T]:
        final_query = await cls.query_modifier(query, "find_one", cls.collection_name())
        data = await (await cls.collection_cls()).find_one(final_query, **kwargs)
        return cls(**data) if data else None

    @classmethod
    async def find_by_id(cls: type[T], _id: str | ObjectId) -> Optional[T]:
        object_id = ObjectId(_id) if isinstance(_id, str) else _id
        return await cls.find_one({'_id': object_id})

    @classmethod
    async def find_or_fail(cls: type[T], query: dict[str, Any], **kwargs) -> T:
        instance = await cls.find_one(query, **kwargs)
        if not instance:
            raise ModelNotFoundException(cls.__name__)
        return instance

    @classmethod
    async def find_by_id_or_fail(cls: type[T], _id: str | ObjectId) -> T:
        object_id = ObjectId(_id) if isinstance(_id, str) else _id
        return await cls.find_or_fail({'_id': object_id})

    @classmethod
    async def exists(cls, query: dict[str, Any]) -> bool:
        return await cls.count(query) > 0

    @classmethod
    async def count(cls, query: dict[str, Any] = None, **kwargs) -> int:
        final_query = await cls.query_modifier(query or {}, "count", cls.collection_name())
        return await (await cls.collection_cls()).count_documents(final_query, **kwargs)

    async def delete(self) -> None:
        coll = await self.collection()
        query = await self.query_modifier({'_id': self._id}, "delete", self.collection_name())
        await coll.delete_one(query)

    async def update(self, data: dict[str, Any]) -> Self:
        for key, value in data.items():
            self.set(key, value)
        await self.save()
        return self

    def is_dirty(self, key: str) -> bool:
        return key in self.clean

    def get(self, key: str, default: Any = None) -> Any:
        attr = getattr(self, key, default)
        return attr if attr is not None else default

    def set(self, key: str, value: Any) -> None:
        setattr(self, key, value)

    @property
    def id(self) -> Optional[ObjectId]:
        return self._id

    def __setattr__(self, key: str, value: Any) -> None:
        """Override the default setattr to track changes to the model."""
        if key in self.model_fields().keys():
            if not self.is_dirty(key):
                self.clean[key] = self.get(key)

        super().__setattr__(key, value)

    def dict(self, *args, **kwargs):
        return {key: serialise(getattr(self, key, None)) for key in self.model_fields().keys()}

    @classmethod
    async def query_modifier(cls, query: dict, function_name: str = None, model_name: str = None) -> dict:
        return query
