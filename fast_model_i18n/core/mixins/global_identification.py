from typing import Optional

from fast_model_i18n import config
from fast_model_i18n.core.global_id import GlobalId
from fast_model_i18n.exceptions.global_id_exceptions import GlobalIdException


class GlobalIdentification:
    """
    Mixin giving models a global id (`gid://app/Model/id`).
    """

    def to_global_id(self, app: Optional[str] = None) -> GlobalId:
        model_id = getattr(self, "_id", None)
        if model_id is None:
            raise GlobalIdException(
                f"Unable to create a global id for a new {self.__class__.__name__} record"
            )
        return GlobalId(app or config.GLOBAL_ID_APP, self.__class__.__name__, str(model_id))

    def to_gid(self, app: Optional[str] = None) -> str:
        return str(self.to_global_id(app))

    def to_gid_param(self, app: Optional[str] = None) -> str:
        return self.to_global_id(app).to_param()
