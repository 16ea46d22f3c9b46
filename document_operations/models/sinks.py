"""
Response Sinks

A sink receives one envelope payload ("new", "old", or the document itself)
decoded from a response. Callers pass sinks with with_return_new(),
with_return_old() or as the result argument of read_document(), then read
them after the call returns.

    new_doc = PayloadSink(User)
    await manager.create_document(user, options=[with_return_new(new_doc)])
    print(new_doc.value.name)

Plain dicts are accepted anywhere a sink is and are updated in place. Lists
are accepted by batch operations only: slot i receives item i's payload.
"""

from typing import Any, List, Mapping, MutableMapping, Optional, Type

from pydantic import BaseModel, ValidationError

from arango_ops_exceptions import DecodeError, InvalidArgumentError


class PayloadSink:
    """
    Holds the last payload it received.

    Args:
        model: Optional pydantic model the payload is validated into
    """

    def __init__(self, model: Optional[Type[BaseModel]] = None):
        self.model = model
        self.value: Any = None
        self.received = False

    def receive(self, payload: Any) -> None:
        if self.model is not None:
            try:
                self.value = self.model.model_validate(payload)
            except ValidationError as e:
                raise DecodeError(
                    f"Payload does not match {self.model.__name__}: {e.error_count()} validation errors"
                ) from e
        else:
            self.value = payload
        self.received = True

    def __repr__(self) -> str:
        return f"PayloadSink(model={getattr(self.model, '__name__', None)}, received={self.received})"


class DictSink:
    """Merges a JSON object payload into an existing mutable mapping."""

    def __init__(self, target: MutableMapping[str, Any]):
        self.target = target

    def receive(self, payload: Any) -> None:
        if not isinstance(payload, Mapping):
            raise DecodeError(
                f"Expected a JSON object, got {type(payload).__name__}"
            )
        self.target.update(payload)


class ListItemSink:
    """
    Writes a payload into one slot of a caller-provided list.

    If the slot already holds a sink, the payload is delivered to it instead.
    """

    def __init__(self, target: List[Any], index: int):
        self.target = target
        self.index = index

    def receive(self, payload: Any) -> None:
        slot = self.target[self.index]
        if hasattr(slot, "receive"):
            slot.receive(payload)
        elif isinstance(slot, MutableMapping):
            DictSink(slot).receive(payload)
        else:
            self.target[self.index] = payload


def as_sink(sink: Any) -> Any:
    """
    Normalize a caller-provided sink.

    Returns objects with a receive() method unchanged, wraps mappings in a
    DictSink and returns lists unchanged for per-item distribution by batch
    operations.

    Raises:
        InvalidArgumentError: If sink is none of the above
    """
    if hasattr(sink, "receive"):
        return sink
    if isinstance(sink, MutableMapping):
        return DictSink(sink)
    if isinstance(sink, list):
        return sink
    raise InvalidArgumentError(
        f"Sink must be a PayloadSink, dict or list, got {type(sink).__name__}"
    )
