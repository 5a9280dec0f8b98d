from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping

from parallai.api.base import ApiObject


@dataclass
class ModelPermission(ApiObject):
    id: str = ""
    object: str = ""
    created: int = 0
    allow_create_engine: bool = False
    allow_sampling: bool = False
    allow_logprobs: bool = False
    allow_search_indices: bool = False
    allow_view: bool = False
    allow_fine_tuning: bool = False
    organization: str = ""
    group: Any = None
    is_blocking: bool = False


@dataclass
class ModelDetails(ApiObject):
    """
    A model available through the API.

    Attributes:
        id (str): Model identifier, used as its name
        object (str): Always "model"
        created (int): Unix time the model was created
        owned_by (str): Owner of the model
        permission (list[ModelPermission]): Permissions attached to the model
        root (str): Root model the model derives from
        parent (Any): Immediate parent model, if any
    """

    id: str = ""
    object: str = ""
    created: int = 0
    owned_by: str = ""
    permission: list[ModelPermission] = field(default_factory=list)
    root: str = ""
    parent: Any = None

    _nested: ClassVar[Mapping[str, type[ApiObject]]] = {"permission": ModelPermission}

    @property
    def name(self) -> str:
        return self.id


class ModelsData(list[ModelDetails]):
    def names(self) -> list[str]:
        return [m.name for m in self]


@dataclass
class ModelListResponse(ApiObject):
    object: str = ""
    data: list[ModelDetails] = field(default_factory=list)

    _nested: ClassVar[Mapping[str, type[ApiObject]]] = {"data": ModelDetails}


@dataclass
class ModelDeleteResponse(ApiObject):
    id: str = ""
    object: str = ""
    deleted: bool = False
