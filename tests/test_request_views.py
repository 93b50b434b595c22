import datetime as dt
import unittest

from _support_api import BaseAPITestCase

from oa_client.views.persetujuan import ACCESS_DENIED, LOAD_ERROR


class TestPengajuanView(BaseAPITestCase):
    def test_submit_procurement(self):
        app = self.login("test")
        view = app.pengajuan_view()
        form = view.form
        form.add_row()
        form.set_field("pengadaan", "nama_barang", 0, "Laptop")
        form.set_field("pengadaan", "nama_barang", 1, "Monitor")
        form.set_field("pengadaan", "jumlah", 1, 2)

        self.assertTrue(view.submit(today=dt.date(2024, 6, 3)))

        post = [c for c in self.httpd.calls if c["method"] == "POST" and c["path"] == "/requests"][-1]
        self.assertEqual(post["authorization"], f"Bearer {app.session.token}")
        self.assertEqual(post["body"]["unit"], "IT")
        self.assertEqual(post["body"]["tgl_request"], "2024-06-03")
        self.assertEqual(post["body"]["nama_barang_array"], ["Laptop", "Monitor"])
        self.assertEqual(post["body"]["nama_barang"], "Laptop")
        self.assertEqual(post["body"]["jumlah"], 1)
        self.assertTrue(view.success)
        self.assertIsNone(view.error)
        self.assertEqual(view.created["status_request"], "DIAJUKAN")
        self.assertEqual(view.form.row_count(), 1)

        note = app.notifications.notifications[-1]
        self.assertEqual(note.type, "success")
        self.assertEqual(note.title, "Pengajuan Berhasil Dibuat!")
        self.assertIn("pengadaan", note.message)
        self.assertEqual(note.position, "top-center")

    def test_missing_required_fields_never_reach_backend(self):
        app = self.login("test")
        view = app.pengajuan_view()
        view.form.select("peminjaman")
        before = len(self.httpd.calls)
        self.assertFalse(view.submit())
        self.assertIn("lokasi wajib diisi", view.error)
        self.assertEqual(len(self.httpd.calls), before)
        self.assertEqual(app.notifications.notifications, [])

    def test_backend_error_message_is_shown(self):
        app = self.login("test")
        view = app.pengajuan_view()
        view.form.set_field("pengadaan", "nama_barang", 0, "Laptop")
        self.httpd.fail_next = (400, {"error": "unit tidak valid"})
        self.assertFalse(view.submit())
        self.assertEqual(view.error, "unit tidak valid")
        self.assertFalse(view.success)
        self.assertFalse(view.loading)
        self.assertEqual(view.form.rows()[0]["nama_barang"], "Laptop")

    def test_response_without_success_flag_fails(self):
        app = self.login("test")
        view = app.pengajuan_view()
        view.form.set_field("pengadaan", "nama_barang", 0, "Laptop")
        self.httpd.fail_next = (201, {"request": {"id": 9}})
        self.assertFalse(view.submit())
        self.assertEqual(view.error, "Gagal membuat pengajuan")


class TestPersetujuanView(BaseAPITestCase):
    def setUp(self):
        super().setUp()
        self.httpd.seed_request(id=41, jenis_request="perbaikan", status_request="DISETUJUI")
        self.httpd.seed_request(id=42, jenis_request="pengadaan")
        self.httpd.seed_request(id=43, jenis_request="peminjaman")

    def test_non_operator_is_denied(self):
        app = self.login("test")
        view = app.persetujuan_view()
        self.assertTrue(view.access_denied)
        self.assertEqual(view.load(), [])
        self.assertEqual(view.error, ACCESS_DENIED)
        self.assertFalse(view.approve(42))
        self.assertEqual(self.status_calls(), [])

    def test_pending_by_default_then_all(self):
        view = self.login("operator").persetujuan_view()
        view.load()
        self.assertEqual([r["id"] for r in view.display_requests], [42, 43])
        self.assertTrue(view.toggle_show_all())
        self.assertEqual([r["id"] for r in view.display_requests], [41, 42, 43])
        self.assertEqual(view.counts, {"pending": 2, "approved": 1, "rejected": 0})

    def test_reject_with_reason(self):
        app = self.login("operator")
        view = app.persetujuan_view()
        view.load()
        view.open_detail(42)

        self.assertTrue(view.reject(42, "Budget exceeded"))

        calls = self.status_calls()
        self.assertEqual(len(calls), 1)
        self.assertEqual(calls[0]["path"], "/requests/42/status")
        self.assertEqual(calls[0]["body"], {"status_request": "DITOLAK", "approved_by": "Budi Operator", "keterangan": "Budget exceeded"})
        note = app.notifications.notifications[-1]
        self.assertEqual(note.type, "rejected")
        self.assertFalse(note.auto_close)
        self.assertEqual(note.message, "Pengajuan pengadaan ditolak oleh Budi Operator. Alasan: Budget exceeded")
        self.assertEqual(self.timers.pending(), [])
        self.assertIsNone(view.selected)
        self.assertEqual([r["id"] for r in view.pending_requests], [43])

    def test_approve_uses_default_note(self):
        app = self.login("operator")
        view = app.persetujuan_view()
        view.load()
        self.assertTrue(view.approve(43))
        self.assertEqual(self.status_calls()[0]["body"]["keterangan"], "Disetujui oleh operator")
        note = app.notifications.notifications[-1]
        self.assertEqual((note.type, note.title), ("approved", "Pengajuan Disetujui!"))
        self.assertEqual(view.counts["approved"], 2)

    def test_processing_and_completed(self):
        app = self.login("operator")
        view = app.persetujuan_view()
        view.load()
        self.assertTrue(view.mark_processing(41))
        self.assertTrue(view.mark_completed(41))
        kinds = [n.type for n in app.notifications.notifications]
        self.assertEqual(kinds, ["pending", "success"])
        self.assertEqual(self.httpd.requests[41]["status_request"], "SELESAI")

    def test_update_failure_shows_error(self):
        app = self.login("operator")
        view = app.persetujuan_view()
        view.load()
        view.open_detail(42)
        self.httpd.fail_next = (500, {"error": "boom"})
        self.assertFalse(view.approve(42))
        note = app.notifications.notifications[-1]
        self.assertEqual(note.type, "error")
        self.assertEqual(note.title, "Gagal Mengupdate Status")
        self.assertFalse(view.updating)
        self.assertEqual(view.selected["id"], 42)

    def test_unknown_id_updates_without_toast(self):
        app = self.login("operator")
        view = app.persetujuan_view()
        self.httpd.seed_request(id=77)
        self.assertTrue(view.approve(77))
        self.assertEqual(app.notifications.notifications, [])
        self.assertEqual(self.httpd.requests[77]["status_request"], "DISETUJUI")

    def test_load_failure(self):
        view = self.login("operator").persetujuan_view()
        self.httpd.fail_next = (500, {})
        view.load()
        self.assertEqual(view.error, LOAD_ERROR)
        self.assertFalse(view.loading)


if __name__ == "__main__":
    unittest.main()
