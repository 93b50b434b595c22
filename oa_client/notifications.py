from __future__ import annotations

import random
import threading
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable


EXIT_ANIMATION_SECONDS = 0.3
DEFAULT_POSITION = "top-right"
LIFECYCLE_POSITION = "top-center"

TimerFactory = Callable[[float, Callable[[], None]], Any]


@dataclass(frozen=True)
class Notification:
    id: float
    type: str = "info"
    title: str = ""
    message: str = ""
    duration: int = 5000
    auto_close: bool = True
    position: str = DEFAULT_POSITION
    extra: dict[str, Any] = field(default_factory=dict)


_KNOWN_FIELDS = {"type", "title", "message", "duration", "auto_close", "position"}


def _new_id() -> float:
    return time.time() * 1000 + random.random()


class ToastState(Enum):
    IDLE = "idle"
    VISIBLE = "visible"
    DISMISSING = "dismissing"
    REMOVED = "removed"


class Toast:
    """Display lifecycle of one notification: idle -> visible -> dismissing -> removed."""

    def __init__(self, notification: Notification, on_removed: Callable[[float], None], timer_factory: TimerFactory):
        self.notification = notification
        self.state = ToastState.IDLE
        self._on_removed = on_removed
        self._timer_factory = timer_factory
        self._auto_timer = None
        self._exit_timer = None
        self._lock = threading.Lock()

    def show(self) -> None:
        with self._lock:
            if self.state is not ToastState.IDLE:
                return
            self.state = ToastState.VISIBLE
            if self.notification.auto_close:
                self._auto_timer = self._start(self.notification.duration / 1000, self.dismiss)

    def dismiss(self) -> None:
        with self._lock:
            if self.state is not ToastState.VISIBLE:
                return
            self.state = ToastState.DISMISSING
            if self._auto_timer is not None:
                self._auto_timer.cancel()
                self._auto_timer = None
            self._exit_timer = self._start(EXIT_ANIMATION_SECONDS, self._finish)

    def cancel(self) -> None:
        with self._lock:
            for timer in (self._auto_timer, self._exit_timer):
                if timer is not None:
                    timer.cancel()
            self._auto_timer = self._exit_timer = None
            self.state = ToastState.REMOVED

    def _finish(self) -> None:
        with self._lock:
            if self.state is not ToastState.DISMISSING:
                return
            self.state = ToastState.REMOVED
            self._exit_timer = None
        self._on_removed(self.notification.id)

    def _start(self, seconds: float, callback: Callable[[], None]):
        timer = self._timer_factory(seconds, callback)
        if hasattr(timer, "daemon"):
            timer.daemon = True
        timer.start()
        return timer


class NotificationQueue:
    def __init__(self, timer_factory: TimerFactory | None = None):
        self._timer_factory: TimerFactory = timer_factory or threading.Timer
        self._items: list[Notification] = []
        self._toasts: dict[float, Toast] = {}
        self._lock = threading.Lock()

    @property
    def notifications(self) -> list[Notification]:
        with self._lock:
            return list(self._items)

    def toast(self, notification_id: float) -> Toast | None:
        with self._lock:
            return self._toasts.get(notification_id)

    def add(self, fields: dict[str, Any] | None = None, **kwargs: Any) -> float:
        merged = {**(fields or {}), **kwargs}
        known = {k: v for k, v in merged.items() if k in _KNOWN_FIELDS}
        extra = {k: v for k, v in merged.items() if k not in _KNOWN_FIELDS and k != "id"}
        notification = Notification(id=_new_id(), extra=extra, **known)
        with self._lock:
            while any(n.id == notification.id for n in self._items):
                notification = replace(notification, id=_new_id())
            self._items.append(notification)
            toast = Toast(notification, self.remove, self._timer_factory)
            self._toasts[notification.id] = toast
        toast.show()
        return notification.id

    def remove(self, notification_id: float) -> None:
        with self._lock:
            self._items = [n for n in self._items if n.id != notification_id]
            toast = self._toasts.pop(notification_id, None)
        if toast is not None and toast.state is not ToastState.REMOVED:
            toast.cancel()

    def clear_all(self) -> None:
        with self._lock:
            toasts = list(self._toasts.values())
            self._items = []
            self._toasts = {}
        for toast in toasts:
            toast.cancel()

    def show_success(self, title: str, message: str, **options: Any) -> float:
        return self.add({"type": "success", "title": title, "message": message, "duration": 4000, **options})

    def show_error(self, title: str, message: str, **options: Any) -> float:
        return self.add({"type": "error", "title": title, "message": message, "duration": 6000, "auto_close": False, **options})

    def show_warning(self, title: str, message: str, **options: Any) -> float:
        return self.add({"type": "warning", "title": title, "message": message, "duration": 5000, **options})

    def show_info(self, title: str, message: str, **options: Any) -> float:
        return self.add({"type": "info", "title": title, "message": message, "duration": 4000, **options})

    def show_pending(self, title: str, message: str, **options: Any) -> float:
        return self.add({"type": "pending", "title": title, "message": message, "duration": 3000, **options})

    def show_approved(self, title: str, message: str, **options: Any) -> float:
        return self.add({"type": "approved", "title": title, "message": message, "duration": 4000, **options})

    def show_rejected(self, title: str, message: str, **options: Any) -> float:
        return self.add({"type": "rejected", "title": title, "message": message, "duration": 5000, "auto_close": False, **options})

    # request lifecycle
    def show_pengajuan_success(self, jenis_request: str) -> float:
        return self.show_success(
            "Pengajuan Berhasil Dibuat!",
            f"Pengajuan {jenis_request} telah berhasil dibuat dan sedang menunggu persetujuan.",
            position=LIFECYCLE_POSITION,
        )

    def show_pengajuan_approved(self, jenis_request: str, approver: str) -> float:
        return self.show_approved(
            "Pengajuan Disetujui!",
            f"Pengajuan {jenis_request} telah disetujui oleh {approver}.",
            position=LIFECYCLE_POSITION,
        )

    def show_pengajuan_rejected(self, jenis_request: str, approver: str, reason: str | None = None) -> float:
        message = f"Pengajuan {jenis_request} ditolak oleh {approver}."
        if reason:
            message = f"Pengajuan {jenis_request} ditolak oleh {approver}. Alasan: {reason}"
        return self.show_rejected("Pengajuan Ditolak", message, position=LIFECYCLE_POSITION)

    def show_pengajuan_processed(self, jenis_request: str, processor: str) -> float:
        return self.show_pending(
            "Pengajuan Sedang Diproses",
            f"Pengajuan {jenis_request} sedang diproses oleh {processor}.",
            position=LIFECYCLE_POSITION,
        )

    def show_pengajuan_completed(self, jenis_request: str, completer: str) -> float:
        return self.show_success(
            "Pengajuan Selesai",
            f"Pengajuan {jenis_request} telah selesai diproses oleh {completer}.",
            position=LIFECYCLE_POSITION,
        )
