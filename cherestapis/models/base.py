"""Base model for the Che workspace wire format (camelCase JSON)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CheModel(BaseModel):
    """Pydantic base with camelCase aliases.

    Fields are populated by either name, so ``machine_token`` and
    ``machineToken`` both validate.  Serialize with ``by_alias=True``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
