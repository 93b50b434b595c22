import socket
import threading
from http.client import HTTPException

from _support_api import BaseAPITestCase, MemoryStorage

from oa_client.gateway import Gateway, GatewayError


class TestGateway(BaseAPITestCase):
    def test_bearer_header_attached_when_token_stored(self):
        app = self.login("test")
        app.gateway.health_check()
        last = self.httpd.calls[-1]
        self.assertEqual(last["path"], "/health")
        self.assertTrue(last["authorization"].startswith("Bearer tok-"))

    def test_no_auth_header_without_token(self):
        app = self.make_app()
        self.assertEqual(app.gateway.health_check()["status"], "ok")
        self.assertIsNone(self.httpd.calls[-1]["authorization"])

    def test_token_read_on_every_call(self):
        storage = MemoryStorage()
        gateway = Gateway(self.base_url, storage)
        gateway.health_check()
        storage.set_item("token", "abc")
        gateway.health_check()
        self.assertIsNone(self.httpd.calls[0]["authorization"])
        self.assertEqual(self.httpd.calls[1]["authorization"], "Bearer abc")

    def test_error_prefers_message_field(self):
        app = self.make_app()
        self.httpd.fail_next = (400, {"message": "Bad thing", "error": "ignored"})
        with self.assertRaises(GatewayError) as ctx:
            app.gateway.get_all_requests()
        self.assertEqual(ctx.exception.message, "Bad thing")
        self.assertEqual(ctx.exception.status, 400)

    def test_error_falls_back_to_error_field(self):
        app = self.login("test")
        with self.assertRaises(GatewayError) as ctx:
            app.gateway.get_request_by_id(999)
        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(str(ctx.exception), "record not found")

    def test_error_generic_without_message(self):
        app = self.make_app()
        self.httpd.fail_next = (502, {})
        with self.assertRaises(GatewayError) as ctx:
            app.gateway.health_check()
        self.assertEqual(ctx.exception.message, "HTTP error! status: 502")

    def test_unauthenticated_call_raises_401(self):
        app = self.make_app()
        with self.assertRaises(GatewayError) as ctx:
            app.gateway.get_current_user()
        self.assertEqual(ctx.exception.status, 401)

    def test_transport_failure_wrapped(self):
        gateway = Gateway("http://127.0.0.1:1/api", MemoryStorage(), timeout=1)
        with self.assertRaises(GatewayError) as ctx:
            gateway.health_check()
        self.assertIsNone(ctx.exception.status)

    def test_malformed_response_wrapped(self):
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        port = listener.getsockname()[1]

        def answer_garbage():
            conn, _ = listener.accept()
            with conn:
                conn.recv(65536)
                conn.sendall(b"garbage\r\n\r\n")

        thread = threading.Thread(target=answer_garbage, daemon=True)
        thread.start()
        try:
            gateway = Gateway(f"http://127.0.0.1:{port}/api", MemoryStorage(), timeout=5)
            with self.assertRaises(GatewayError) as ctx:
                gateway.health_check()
        finally:
            thread.join(timeout=2)
            listener.close()
        self.assertIsNone(ctx.exception.status)
        self.assertIsInstance(ctx.exception.__cause__, HTTPException)

    def test_invalid_base_url(self):
        with self.assertRaises(ValueError):
            Gateway("localhost:8080", MemoryStorage())

    def test_request_endpoints(self):
        app = self.login("test")
        created = app.gateway.create_request({"jenis_request": "pengadaan", "unit": "IT", "tgl_request": "2024-01-01"})
        self.assertTrue(created["success"])
        req_id = created["request"]["id"]

        self.assertEqual(app.gateway.get_request_by_id(req_id)["status_request"], "DIAJUKAN")
        self.assertEqual([r["id"] for r in app.gateway.get_my_requests()], [req_id])
        self.assertEqual(len(app.gateway.get_all_requests()["data"]), 1)

        app.gateway.update_request_status(req_id, {"status_request": "DIPROSES", "approved_by": "x", "keterangan": ""})
        self.assertEqual(self.httpd.requests[req_id]["status_request"], "DIPROSES")

        app.gateway.delete_request(req_id)
        self.assertNotIn(req_id, self.httpd.requests)
        self.assertEqual(
            [(c["method"], c["path"]) for c in self.httpd.calls[-1:]],
            [("DELETE", f"/requests/{req_id}")],
        )

    def test_user_endpoints(self):
        app = self.login("operator")
        created = app.gateway.create_user(
            {"username": "new", "password": "secret1", "name": "New", "email": "n@example.com", "unit": "IT", "role": "user"}
        )
        user_id = created["user"]["id"]
        self.assertEqual(app.gateway.get_user_by_id(user_id)["username"], "new")
        app.gateway.update_user(user_id, {"unit": "Umum"})
        self.assertEqual(self.httpd.users[user_id]["unit"], "Umum")
        app.gateway.delete_user(user_id)
        self.assertNotIn(user_id, self.httpd.users)
        self.assertEqual(len(app.gateway.get_all_users()), 2)

    def test_register(self):
        app = self.make_app()
        user = app.gateway.register(
            {"username": "reg", "password": "secret1", "name": "Reg", "email": "r@example.com", "unit": "IT", "role": "user"}
        )
        self.assertEqual(user["username"], "reg")
        self.assertNotIn("password", user)
