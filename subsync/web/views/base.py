"""
Feature view base.

A view owns one immutable snapshot of its state. Loading and every mutation
build a new snapshot and swap it in whole; a failed mutation only changes the
notice and leaves the items as they were.
"""

import inspect
import logging
from typing import Any, Callable, ClassVar

from pydantic import BaseModel, ValidationError

from subsync.core.errors import AuthError, DataError
from subsync.repositories.access import DataAccess
from subsync.schemas.user import CurrentUser

logger = logging.getLogger(__name__)


class ViewSnapshot(BaseModel):
    loading: bool = True
    items: tuple[Any, ...] = ()
    notice: str | None = None
    summary: Any = None

    class Config:
        frozen = True


class FeatureView:
    section: ClassVar[str]
    title: ClassVar[str]
    empty_message: ClassVar[str] = "Nothing here yet."
    # action name -> method name
    actions: ClassVar[dict[str, str]] = {}

    def __init__(self, data: DataAccess, user: CurrentUser, **filters: Any):
        self.data = data
        self.user = user
        self.filters = filters
        self.snapshot = ViewSnapshot()

    # ---------------------------
    # data
    # ---------------------------

    def fetch(self) -> list:
        raise NotImplementedError

    def summarize(self, items: tuple) -> Any:
        return None

    def _replace(self, **changes: Any) -> ViewSnapshot:
        self.snapshot = self.snapshot.model_copy(update=changes)
        return self.snapshot

    def _set_items(self, items, notice: str | None = None) -> ViewSnapshot:
        items = tuple(items)
        return self._replace(loading=False, items=items, summary=self.summarize(items), notice=notice)

    def load(self) -> ViewSnapshot:
        try:
            return self._set_items(self.fetch())
        except DataError as exc:
            logger.warning("%s view failed to load: %s", self.section, exc.message)
            return self._replace(loading=False, notice=exc.message)

    # ---------------------------
    # mutations
    # ---------------------------

    def run(self, action: str, params: dict | None = None) -> ViewSnapshot:
        method = self.actions.get(action)
        if method is None:
            raise DataError(f"Unknown action '{action}' for {self.section}", status_code=404)
        if self.snapshot.loading:
            self.load()
        handler = getattr(self, method)
        params = params or {}
        try:
            inspect.signature(handler).bind(**params)
        except TypeError as exc:
            return self._replace(notice=f"Invalid input for {action}: {exc}")
        try:
            handler(**params)
        except ValidationError as exc:
            return self._replace(notice=f"Invalid input for {action}: {exc}")
        except (DataError, AuthError) as exc:
            logger.info("%s/%s failed for user id=%s: %s", self.section, action, self.user.id, exc.message)
            return self._replace(notice=exc.message)
        return self.snapshot

    def _patched(self, item: Any, notice: str | None = None) -> ViewSnapshot:
        items = [item if getattr(i, "id", None) == item.id else i for i in self.snapshot.items]
        return self._set_items(items, notice)

    def _without(self, id: int, notice: str | None = None) -> ViewSnapshot:
        return self._set_items([i for i in self.snapshot.items if i.id != id], notice)

    def _prepended(self, item: Any, notice: str | None = None) -> ViewSnapshot:
        return self._set_items([item, *self.snapshot.items], notice)

    def _require_owner(self, obj, what: str):
        if obj.user_id != self.user.id:
            raise AuthError(f"This {what} belongs to another account", status_code=403)
        return obj

    # ---------------------------
    # output
    # ---------------------------

    def render(self) -> dict:
        snap = self.snapshot
        out: dict[str, Any] = {"section": self.section, "title": self.title}
        if snap.loading:
            out["status"] = "loading"
            return out

        out["status"] = "ready" if snap.items else "empty"
        out["items"] = [_dump(i) for i in snap.items]
        if not snap.items:
            out["message"] = self.empty_message
        if snap.summary is not None:
            out["summary"] = _dump(snap.summary)
        if snap.notice:
            out["notice"] = snap.notice
        if self.filters:
            out["filters"] = {k: v for k, v in self.filters.items() if v is not None}
        return out


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {k: _dump(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_dump(v) for v in value]
    return value


ViewFactory = Callable[..., FeatureView]
