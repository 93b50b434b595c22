from __future__ import annotations

import argparse
import getpass
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from .app import App
from .config import load_config
from .forms import VARIANTS
from .gateway import GatewayError
from .jsonutil import json_dumps
from .routes import resolve
from .serializers import extra_items_text, primary_label, status_label


def _parse_item(raw: str) -> dict[str, str]:
    row: dict[str, str] = {}
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        if "=" not in part:
            raise argparse.ArgumentTypeError(f"expected key=value, got {part!r}")
        key, value = part.split("=", 1)
        row[key.strip()] = value.strip()
    return row


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="oa-client", description="Work request client (pengajuan / persetujuan / riwayat)")
    parser.add_argument("--base-url", help="backend root, e.g. http://localhost:8080/api")
    parser.add_argument("--home", help="directory holding the local session storage")
    parser.add_argument("--timeout", type=float, help="socket timeout in seconds")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login")
    p.add_argument("username")
    p.add_argument("--password")

    sub.add_parser("logout")
    sub.add_parser("whoami")
    sub.add_parser("health")
    sub.add_parser("stats")

    p = sub.add_parser("submit")
    p.add_argument("--type", dest="jenis_request", choices=VARIANTS, default=VARIANTS[0])
    p.add_argument("--item", action="append", type=_parse_item, default=[], help="row as key=value,key=value")
    p.add_argument("--keterangan", default="")

    p = sub.add_parser("history")
    p.add_argument("--start-date", default="")
    p.add_argument("--end-date", default="")
    p.add_argument("--unit", default="")
    p.add_argument("--status", default="")
    p.add_argument("--search", default="")
    p.add_argument("--export", metavar="DIR")

    p = sub.add_parser("pending")
    p.add_argument("--all", action="store_true", dest="show_all")

    for name in ("approve", "reject"):
        p = sub.add_parser(name)
        p.add_argument("request_id")
        p.add_argument("--note")

    p = sub.add_parser("users")
    users_sub = p.add_subparsers(dest="users_command", required=True)
    users_sub.add_parser("list")
    p = users_sub.add_parser("add")
    for field in ("username", "name", "email", "unit"):
        p.add_argument(f"--{field}", required=True)
    p.add_argument("--role", choices=("user", "operator"), default="user")
    p.add_argument("--password")
    p = users_sub.add_parser("delete")
    p.add_argument("user_id")
    p.add_argument("--yes", action="store_true")
    return parser


def _configure(args: argparse.Namespace):
    config = load_config()
    overrides: dict[str, Any] = {}
    if args.base_url:
        overrides["base_url"] = args.base_url.rstrip("/")
    if args.home:
        overrides["home"] = Path(args.home)
    if args.timeout:
        overrides["timeout"] = args.timeout
    if args.verbose:
        overrides["log_level"] = "INFO" if args.verbose == 1 else "DEBUG"
    return replace(config, **overrides)


def _flush_notifications(app: App, out) -> None:
    for n in app.notifications.notifications:
        print(f"[{n.type}] {n.title}: {n.message}", file=out)
    app.notifications.clear_all()


def _require(app: App, path: str) -> bool:
    decision = resolve(path, app.session)
    if decision.action == "render":
        return True
    if decision.target == "/login":
        print("not logged in; run `oa-client login <username>` first", file=sys.stderr)
    else:
        print("Halaman ini hanya dapat diakses oleh operator.", file=sys.stderr)
    return False


def _cmd_login(app: App, args) -> int:
    password = args.password if args.password is not None else getpass.getpass("Password: ")
    result = app.session.login(args.username, password)
    if not result.success:
        print(f"login failed: {result.message}", file=sys.stderr)
        return 1
    user = app.session.user or {}
    print(f"logged in as {user.get('username', args.username)} ({user.get('role')})")
    return 0


def _cmd_whoami(app: App, args) -> int:
    if not app.session.is_authenticated:
        print("not logged in", file=sys.stderr)
        return 1
    print(json_dumps(app.session.user))
    return 0


def _cmd_health(app: App, args) -> int:
    print(json_dumps(app.gateway.health_check()))
    return 0


def _cmd_stats(app: App, args) -> int:
    if not _require(app, "/dashboard"):
        return 1
    view = app.dashboard_view()
    view.load()
    for card in view.cards():
        print(f"{card.title}: {card.value}")
    return 0


def _cmd_submit(app: App, args) -> int:
    if not _require(app, "/pengajuan"):
        return 1
    view = app.pengajuan_view()
    form = view.form
    form.select(args.jenis_request)
    form.keterangan = args.keterangan
    for idx, row in enumerate(args.item):
        if idx > 0:
            form.add_row()
        for key, value in row.items():
            try:
                form.set_field(args.jenis_request, key, idx, value)
            except KeyError:
                print(f"unknown field for {args.jenis_request}: {key}", file=sys.stderr)
                return 2
    if not view.submit():
        print(f"submit failed: {view.error}", file=sys.stderr)
        return 1
    if view.created:
        print(f"created request {view.created.get('id')}")
    return 0


def _format_row(item: dict[str, Any]) -> str:
    label, _ = primary_label(item)
    extra = extra_items_text(item)
    what = (label or "-") + (f" ({extra})" if extra else "")
    return "\t".join(
        str(x if x is not None else "-")
        for x in (item.get("id"), item.get("jenis_request"), item.get("unit"), what, item.get("pemohon"), item.get("status"))
    )


def _cmd_history(app: App, args) -> int:
    if not _require(app, "/riwayat"):
        return 1
    view = app.riwayat_view()
    if not view.load():
        return 1
    for name in ("start_date", "end_date", "unit", "status"):
        view.set_filter(name, getattr(args, name))
    rows = view.search(args.search) if args.search else view.store.filter(view.filters)
    for item in rows:
        print(_format_row(item))
    if args.export:
        target = view.export_to(Path(args.export))
        if target is None:
            return 1
        print(f"exported {target}")
    return 0


def _cmd_pending(app: App, args) -> int:
    if not _require(app, "/persetujuan"):
        return 1
    view = app.persetujuan_view()
    view.show_all = args.show_all
    view.load()
    if view.error:
        print(view.error, file=sys.stderr)
        return 1
    for req in view.display_requests:
        label, _ = primary_label(req)
        print(
            "\t".join(
                str(x if x is not None else "-")
                for x in (req.get("id"), req.get("jenis_request"), req.get("unit"), label, req.get("requested_by"), status_label(req.get("status_request")))
            )
        )
    return 0


def _cmd_decide(app: App, args) -> int:
    if not _require(app, "/persetujuan"):
        return 1
    view = app.persetujuan_view()
    view.load()
    if args.command == "approve":
        ok = view.approve(args.request_id, args.note) if args.note else view.approve(args.request_id)
    else:
        ok = view.reject(args.request_id, args.note) if args.note else view.reject(args.request_id)
    return 0 if ok else 1


def _cmd_users(app: App, args) -> int:
    if not _require(app, "/pengguna"):
        return 1
    view = app.pengguna_view()
    if args.users_command == "list":
        for user in view.load():
            print("\t".join(str(user.get(k) or "-") for k in ("id", "username", "name", "role", "unit", "email")))
        return 0
    if args.users_command == "add":
        password = args.password if args.password is not None else getpass.getpass("Password: ")
        data = {k: getattr(args, k) for k in ("username", "name", "email", "unit", "role")}
        ok = view.create({**data, "password": password})
        for message in view.errors.values():
            print(message, file=sys.stderr)
        return 0 if ok else 1
    ok = view.delete(args.user_id, confirm=lambda prompt: args.yes or input(f"{prompt} [y/N] ").strip().lower() == "y")
    return 0 if ok else 1


COMMANDS = {
    "login": _cmd_login,
    "whoami": _cmd_whoami,
    "health": _cmd_health,
    "stats": _cmd_stats,
    "submit": _cmd_submit,
    "history": _cmd_history,
    "pending": _cmd_pending,
    "approve": _cmd_decide,
    "reject": _cmd_decide,
    "users": _cmd_users,
}


def main(argv: list[str] | None = None, *, app: App | None = None) -> int:
    args = build_parser().parse_args(argv)
    if app is None:
        config = _configure(args)
        logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
        app = App.create(config)

    if args.command == "logout":
        app.session.logout()
        print("logged out")
        return 0

    if args.command != "login":
        app.start()
    try:
        code = COMMANDS[args.command](app, args)
    except GatewayError as e:
        print(f"error: {e.message}", file=sys.stderr)
        code = 1
    _flush_notifications(app, sys.stdout)
    return code


if __name__ == "__main__":
    raise SystemExit(main())
