"""Common base for indexed entities."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from daoarc.observable import Observable

if TYPE_CHECKING:
    from daoarc.arc import Arc

S = TypeVar("S")


class Entity(ABC, Generic[S]):
    """An entity identified by a lowercase id, with a write-once static state.

    ``static_state`` is filled either at construction or by the first
    :meth:`fetch_static_state` and is never refetched afterwards. Dynamic
    state is not cached: every :meth:`state` subscription queries again.
    """

    def __init__(self, id_or_static_state: str | S, context: Arc) -> None:
        self.context = context
        self._static_state: S | None = None
        if isinstance(id_or_static_state, str):
            self._id = id_or_static_state.lower()
        else:
            self.set_static_state(id_or_static_state)
            self._id = self._static_id(id_or_static_state).lower()

    @property
    def id(self) -> str:
        return self._id

    @property
    def static_state(self) -> S | None:
        return self._static_state

    def set_static_state(self, state: S) -> None:
        if self._static_state is None:
            self._static_state = state

    async def fetch_static_state(self) -> S:
        if self._static_state is None:
            state = await self.state(subscribe=False).first()
            self.set_static_state(state.to_static())
        return self._static_state  # type: ignore[return-value]

    def _static_id(self, state: S) -> str:
        return state.id  # type: ignore[attr-defined]

    @abstractmethod
    def state(self, **fetch_options: Any) -> Observable[Any]:
        """Live stream of the entity's full state."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._id!r})"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self._id == other._id  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._id))
