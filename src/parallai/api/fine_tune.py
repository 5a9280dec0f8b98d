from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping

from parallai.api.base import ApiObject, Requester
from parallai.api.file import FileDetails


@dataclass
class FineTuneRequest(Requester):
    """
    Request for creating a fine-tuning job at /fine-tunes.

    Attributes:
        training_file (str): ID of an uploaded file with training data
        validation_file (str | None): ID of an uploaded file with validation data
        model (str | None): Base model to fine-tune
        n_epochs (int | None): Number of epochs to train for
        batch_size (int | None): Batch size used for training
        learning_rate_multiplier (float | None): Multiplier for the learning rate
        prompt_loss_weight (float | None): Weight of the loss on prompt tokens
        compute_classification_metrics (bool | None): Compute classification metrics per epoch
        classification_n_classes (int | None): Number of classes in a classification task
        classification_positive_class (str | None): Positive class in binary classification
        classification_betas (list[float] | None): Beta values for F-beta scores
        suffix (str | None): Suffix for the fine-tuned model name
    """

    training_file: str = ""
    validation_file: str | None = None
    model: str | None = None
    n_epochs: int | None = None
    batch_size: int | None = None
    learning_rate_multiplier: float | None = None
    prompt_loss_weight: float | None = None
    compute_classification_metrics: bool | None = None
    classification_n_classes: int | None = None
    classification_positive_class: str | None = None
    classification_betas: list[float] | None = None
    suffix: str | None = None

    def validate(self) -> None:
        return None


@dataclass
class FineTuneEvent(ApiObject):
    object: str = ""
    created_at: int = 0
    level: str = ""
    message: str = ""


@dataclass
class Hyperparameters(ApiObject):
    batch_size: int = 0
    learning_rate_multiplier: float = 0.0
    n_epochs: int = 0
    prompt_loss_weight: float = 0.0


@dataclass
class FineTuneResponse(ApiObject):
    id: str = ""
    object: str = ""
    model: str = ""
    created_at: int = 0
    events: list[FineTuneEvent] = field(default_factory=list)
    fine_tuned_model: str | None = None  # null until the job succeeds
    hyperparams: Hyperparameters = field(default_factory=Hyperparameters)
    organization_id: str = ""
    result_files: list[Any] = field(default_factory=list)
    status: str = ""
    validation_files: list[Any] = field(default_factory=list)
    training_files: list[FileDetails] = field(default_factory=list)
    updated_at: int = 0

    _nested: ClassVar[Mapping[str, type[ApiObject]]] = {
        "events": FineTuneEvent,
        "hyperparams": Hyperparameters,
        "training_files": FileDetails,
    }


class FineTunesData(list[FineTuneResponse]):
    def ids(self) -> list[str]:
        return [job.id for job in self]


@dataclass
class FineTuneListResponse(ApiObject):
    object: str = ""
    data: list[FineTuneResponse] = field(default_factory=list)

    _nested: ClassVar[Mapping[str, type[ApiObject]]] = {"data": FineTuneResponse}


@dataclass
class FineTuneEventListResponse(ApiObject):
    object: str = ""
    data: list[FineTuneEvent] = field(default_factory=list)

    _nested: ClassVar[Mapping[str, type[ApiObject]]] = {"data": FineTuneEvent}
