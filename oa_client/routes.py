from __future__ import annotations

from dataclasses import dataclass

from .session import OPERATOR_ROLE


LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"

# path -> allowed roles; None means public, () means any authenticated user
ROUTES: dict[str, tuple[str, ...] | None] = {
    LOGIN_PATH: None,
    "/dashboard": (),
    "/profile": (),
    "/pengajuan": (),
    "/persetujuan": (OPERATOR_ROLE,),
    "/riwayat": (),
    "/pengguna": (OPERATOR_ROLE,),
}
REDIRECTS = {"/": HOME_PATH}


@dataclass(frozen=True)
class RouteDecision:
    action: str  # render | redirect | not_found
    target: str


def resolve(path: str, session) -> RouteDecision:
    path = "/" + path.strip().strip("/") if path.strip("/") else "/"
    if path in REDIRECTS:
        return RouteDecision("redirect", REDIRECTS[path])
    if path not in ROUTES:
        return RouteDecision("not_found", path)

    allowed = ROUTES[path]
    if allowed is None:
        return RouteDecision("render", path)
    if not session.is_authenticated:
        return RouteDecision("redirect", LOGIN_PATH)
    if allowed and not session.has_role(*allowed):
        return RouteDecision("redirect", HOME_PATH)
    return RouteDecision("render", path)
