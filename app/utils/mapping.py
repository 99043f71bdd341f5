from typing import Collection, Iterable, List, Type, TypeVar

from pydantic import BaseModel

from app.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)
SchemaT = TypeVar("SchemaT", bound=BaseModel)


def to_entity(request: BaseModel, model: Type[ModelT]) -> ModelT:
    # Omitted values fall back to the column defaults
    return model(**request.model_dump(exclude_none=True))


def to_response(entity: Base, schema: Type[SchemaT]) -> SchemaT:
    return schema.model_validate(entity)


def to_response_list(entities: Iterable[Base], schema: Type[SchemaT]) -> List[SchemaT]:
    return [schema.model_validate(entity) for entity in entities]


def apply_to_existing(
    request: BaseModel, entity: ModelT, keep_when_missing: Collection[str] = ()
) -> ModelT:
    """Overwrite every mutable field of ``entity`` with the request's values.

    Fields named in ``keep_when_missing`` keep their stored value when the
    request leaves them empty.
    """
    for field, value in request.model_dump().items():
        if value is None and field in keep_when_missing:
            continue
        setattr(entity, field, value)
    return entity
