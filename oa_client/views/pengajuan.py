from __future__ import annotations

import datetime as dt
import logging
from typing import Any

from ..forms import FormError, PengajuanForm, build_request_payload
from ..gateway import GatewayError


logger = logging.getLogger(__name__)

SUBMIT_ERROR = "Gagal membuat pengajuan"


class PengajuanView:
    def __init__(self, gateway, session, notifications):
        self.gateway = gateway
        self.session = session
        self.notifications = notifications
        self.form = PengajuanForm()
        self.loading = False
        self.error: str | None = None
        self.success = False
        self.created: dict[str, Any] | None = None

    def payload(self, today: dt.date | None = None) -> dict[str, Any]:
        unit = (self.session.user or {}).get("unit")
        return build_request_payload(self.form, unit=unit, today=today)

    def submit(self, today: dt.date | None = None) -> bool:
        self.error = None
        self.success = False
        try:
            self.form.check_required()
        except FormError as e:
            self.error = "; ".join(e.errors.values())
            return False

        jenis_request = self.form.jenis_request
        self.loading = True
        try:
            response = self.gateway.create_request(self.payload(today))
        except GatewayError as e:
            self.error = e.message or SUBMIT_ERROR
            return False
        finally:
            self.loading = False

        if not (isinstance(response, dict) and response.get("success")):
            logger.warning("create request returned without success flag")
            self.error = SUBMIT_ERROR
            return False
        self.success = True
        self.created = response.get("request")
        self.form.reset()
        self.notifications.show_pengajuan_success(jenis_request)
        return True
