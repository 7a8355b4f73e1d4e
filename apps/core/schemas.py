from ninja import Schema
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel


class CamelSchema(Schema):
    """
    Schema whose JSON keys are camelCase (dueDate, assignedToId, createdAt).
    Snake_case names are accepted on input too.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
