from pydantic import BaseModel
from pydantic import ConfigDict


class MutableModel(BaseModel):
    """Base class for pydantic models that own mutable state (buffers, handles, locks).

    Scribes derive from this: each one owns whatever state it needs and is
    responsible for synchronizing concurrent pushes into it.
    """

    model_config = ConfigDict(
        frozen=False,
        extra="forbid",
        arbitrary_types_allowed=True,
    )
