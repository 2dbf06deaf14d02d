"""Pytest configuration and fixtures for relay tests"""
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import pytest
import httpx

from prompt_relay.relay import PromptRelay

RELAY_ENV_VARS = [
    "RELAY_PROVIDER",
    "RELAY_API_URL",
    "RELAY_API_KEY",
    "RELAY_TIMEOUT",
    "RELAY_VERBOSE",
    "RELAY_CONFIG_FILE",
    "RELAY_SECRET",
    "OPENAI_API_URL",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_URL",
    "ANTHROPIC_API_KEY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from relay settings in the environment and any .env file"""
    for name in RELAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class StubEndpoint:
    """Records requests and answers with a fixed status and body"""

    def __init__(self, status_code: int = 200, body: str = '{"id":"x"}', error: Exception = None):
        self.status_code = status_code
        self.body = body
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.body)

    @property
    def last_payload(self):
        return json.loads(self.requests[-1].content)

    @property
    def last_headers(self):
        return self.requests[-1].headers

    def relay(self, profile: str = "openai", **kwargs) -> PromptRelay:
        return PromptRelay(profile=profile, transport=httpx.MockTransport(self), **kwargs)


@pytest.fixture
def stub():
    """Stub endpoint answering 200 with {"id":"x"}"""
    return StubEndpoint()


class _ChatHandler(BaseHTTPRequestHandler):
    """Chat endpoint on a real socket: 401 without a key, 307 on /redirect"""

    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        self.rfile.read(length)
        self.server.seen.append((self.path, self.headers))

        if self.path == "/redirect":
            self.send_response(307)
            self.send_header("Location", "/chat")
            self.send_header("Content-Length", "0")
            self.end_headers()
            return

        auth = self.headers.get("Authorization", "").strip()
        if auth in ("", "Bearer") and not self.headers.get("x-api-key"):
            body = b'{"error":"missing key"}'
            self.send_response(401)
        else:
            body = b'{"id":"x"}'
            self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def live_server():
    """HTTP server on localhost, base URL in server.base_url"""
    server = ThreadingHTTPServer(("127.0.0.1", 0), _ChatHandler)
    server.seen = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address
    server.base_url = f"http://{host}:{port}"
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
