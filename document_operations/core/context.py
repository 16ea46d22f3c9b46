"""
Call Options and Context Settings

Document operations take their per-call behavior as an explicit list of
options instead of ambient state:

    new_doc = PayloadSink()
    meta = await manager.update_document(
        "alice",
        {"age": 32},
        options=[with_return_new(new_doc), with_wait_for_sync()]
    )

extract_context_settings() turns such a list into a ContextSettings value;
ContextSettings.apply_to() attaches the matching query parameters and headers
to an outgoing request.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Iterable, NamedTuple, Optional, Tuple, Union

from connection_management.connection import Request
from document_operations.models.entities import OverwriteMode
from document_operations.models.sinks import ListItemSink, as_sink

logger = logging.getLogger(__name__)


class CallOption(NamedTuple):
    """A single named call option. Build these with the with_* functions."""
    name: str
    value: Any


def with_return_new(sink: Any) -> CallOption:
    """Ask the server for the document as stored after the operation."""
    return CallOption("return_new", as_sink(sink))


def with_return_old(sink: Any) -> CallOption:
    """Ask the server for the document as it was before the operation."""
    return CallOption("return_old", as_sink(sink))


def with_silent() -> CallOption:
    """Ask the server to return no body at all."""
    return CallOption("silent", True)


def with_wait_for_sync(value: bool = True) -> CallOption:
    """Wait until the change has been synced to disk before the server answers."""
    return CallOption("wait_for_sync", value)


def with_overwrite_mode(mode: Union[OverwriteMode, str]) -> CallOption:
    """Choose what a create does when the document key already exists."""
    return CallOption("overwrite_mode", OverwriteMode(mode))


def with_revision(revision: str) -> CallOption:
    """Only apply the operation if the document still has this revision."""
    return CallOption("revision", revision)


def with_keep_null(value: bool = True) -> CallOption:
    """Keep attributes set to null by an update instead of removing them."""
    return CallOption("keep_null", value)


def with_merge_objects(value: bool = True) -> CallOption:
    """Merge object attributes on update instead of replacing them."""
    return CallOption("merge_objects", value)


def with_ignore_revisions(value: bool = True) -> CallOption:
    """Ignore the _rev attribute in the document body."""
    return CallOption("ignore_revisions", value)


@dataclass(frozen=True)
class ContextSettings:
    """
    Behavioral flags for one call, derived from its options.
    """
    silent: bool = False
    return_old: Any = None
    return_new: Any = None
    wait_for_sync: Optional[bool] = None
    overwrite_mode: Optional[OverwriteMode] = None
    revision: Optional[str] = None
    keep_null: Optional[bool] = None
    merge_objects: Optional[bool] = None
    ignore_revisions: Optional[bool] = None

    def ok_status(self, primary: int, secondary: int) -> Tuple[int, ...]:
        """
        Status codes accepted for a write.

        The server answers `primary` when the write was synced to disk and
        `secondary` when it was only accepted. Without an explicit
        wait-for-sync request the collection's own setting decides, so both
        are accepted. This is wider than accepting only `secondary` in that
        case, which would reject a 201 from a collection that syncs by default.
        """
        if self.wait_for_sync is None:
            return (primary, secondary)
        if self.wait_for_sync:
            return (primary,)
        return (secondary,)

    @property
    def has_list_sink(self) -> bool:
        return isinstance(self.return_old, list) or isinstance(self.return_new, list)

    def for_item(self, index: int) -> "ContextSettings":
        """Settings for item `index` of a batch, with list sinks narrowed to that slot."""
        if not self.has_list_sink:
            return self
        return dataclasses.replace(
            self,
            return_old=_narrow(self.return_old, index),
            return_new=_narrow(self.return_new, index)
        )

    def apply_to(self, request: Request) -> None:
        """Attach query parameters and headers for these settings to request."""
        if self.silent:
            request.set_query("silent", "true")
        if self.return_new is not None:
            request.set_query("returnNew", "true")
        if self.return_old is not None:
            request.set_query("returnOld", "true")
        if self.wait_for_sync is not None:
            request.set_query("waitForSync", _bool_param(self.wait_for_sync))
        if self.overwrite_mode is not None:
            request.set_query("overwriteMode", self.overwrite_mode.value)
        if self.keep_null is not None:
            request.set_query("keepNull", _bool_param(self.keep_null))
        if self.merge_objects is not None:
            request.set_query("mergeObjects", _bool_param(self.merge_objects))
        if self.ignore_revisions is not None:
            request.set_query("ignoreRevs", _bool_param(self.ignore_revisions))
        if self.revision is not None:
            request.set_header("If-Match", self.revision)


def extract_context_settings(
    options: Optional[Iterable[Any]] = None,
    default_wait_for_sync: Optional[bool] = None
) -> ContextSettings:
    """
    Build ContextSettings from call options.

    Unrecognized options are ignored. Later options override earlier ones.

    Args:
        options: Options built with the with_* functions
        default_wait_for_sync: Value used when no with_wait_for_sync option is given
    """
    values = {"wait_for_sync": default_wait_for_sync}
    for option in options or ():
        if isinstance(option, CallOption) and option.name in _FIELD_NAMES:
            values[option.name] = option.value
        else:
            logger.debug(f"Ignoring unrecognized call option {option!r}")
    return ContextSettings(**values)


def apply_context_settings(
    options: Optional[Iterable[Any]],
    request: Request,
    default_wait_for_sync: Optional[bool] = None
) -> ContextSettings:
    """Extract settings from options and attach them to request."""
    settings = extract_context_settings(options, default_wait_for_sync)
    settings.apply_to(request)
    return settings


_FIELD_NAMES = frozenset(f.name for f in dataclasses.fields(ContextSettings))


def _narrow(sink: Any, index: int) -> Any:
    if isinstance(sink, list):
        return ListItemSink(sink, index)
    return sink


def _bool_param(value: bool) -> str:
    return "true" if value else "false"
