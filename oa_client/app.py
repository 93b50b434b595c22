from __future__ import annotations

from dataclasses import dataclass

from .config import ClientConfig
from .gateway import Gateway
from .notifications import NotificationQueue, TimerFactory
from .riwayat import RiwayatStore
from .routes import RouteDecision, resolve
from .session import SessionStore
from .storage import FileStorage, MemoryStorage
from .views.dashboard import DashboardView
from .views.pengajuan import PengajuanView
from .views.pengguna import PenggunaView
from .views.persetujuan import PersetujuanView
from .views.profile import ProfileView
from .views.riwayat import RiwayatView


@dataclass
class App:
    """Composition root: one instance of each shared service, handed to views explicitly."""

    config: ClientConfig
    storage: MemoryStorage
    gateway: Gateway
    session: SessionStore
    notifications: NotificationQueue
    riwayat: RiwayatStore

    @classmethod
    def create(
        cls,
        config: ClientConfig,
        *,
        storage: MemoryStorage | None = None,
        timer_factory: TimerFactory | None = None,
    ) -> "App":
        storage = storage if storage is not None else FileStorage(config.storage_path)
        gateway = Gateway(config.base_url, storage, timeout=config.timeout)
        return cls(
            config=config,
            storage=storage,
            gateway=gateway,
            session=SessionStore(gateway, storage),
            notifications=NotificationQueue(timer_factory),
            riwayat=RiwayatStore(gateway),
        )

    def start(self) -> "App":
        self.session.initialize()
        return self

    def route(self, path: str) -> RouteDecision:
        return resolve(path, self.session)

    def pengajuan_view(self) -> PengajuanView:
        return PengajuanView(self.gateway, self.session, self.notifications)

    def persetujuan_view(self) -> PersetujuanView:
        return PersetujuanView(self.gateway, self.session, self.notifications)

    def riwayat_view(self) -> RiwayatView:
        return RiwayatView(self.riwayat, self.notifications)

    def pengguna_view(self) -> PenggunaView:
        return PenggunaView(self.gateway, self.session, self.notifications)

    def profile_view(self) -> ProfileView:
        return ProfileView(self.session)

    def dashboard_view(self) -> DashboardView:
        return DashboardView(self.session, self.riwayat)
