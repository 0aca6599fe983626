"""RefLab — reference implementation of the HTTP contract httpconform checks.

Serves the greeting, line listing, numeric series and static endpoints with
brotli/gzip negotiation, so the harness can be exercised end to end
(in-process through httpx.WSGITransport, or standalone on port 5000).
"""

import gzip
import mimetypes
import os
import time

import brotli
from flask import Flask, Response, abort, request

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data")

# Bodies shorter than this are not worth compressing.
MIN_COMPRESS_SIZE = 256
# Server preference order; the first one the client accepts wins.
PREFERRED_ENCODINGS = ("br", "gzip")

_MIME_OVERRIDES = {".webp": "image/webp", ".html": "text/html; charset=utf-8"}


# ── Content negotiation ─────────────────────────────────────────

def accepted_encodings(header: str) -> set:
    """Tokens from an Accept-Encoding header, minus the ones with q=0."""
    out = set()
    for part in (header or "").split(","):
        token, _, params = part.strip().partition(";")
        token = token.strip().lower()
        if not token:
            continue
        q = params.strip()
        if q.startswith("q="):
            try:
                if float(q[2:]) == 0:
                    continue
            except ValueError:
                continue
        out.add(token)
    return out


def choose_encoding(header: str):
    accepted = accepted_encodings(header)
    for enc in PREFERRED_ENCODINGS:
        if enc in accepted:
            return enc
    return None


def compress(data: bytes, enc: str) -> bytes:
    if enc == "br":
        return brotli.compress(data)
    return gzip.compress(data)


# ── Application factory ─────────────────────────────────────────

def create_app(strings_prefix="/strings", math_prefix="/math", name_max_length=500,
               text_content_type="text/plain; charset=utf-8", async_delay=0.02,
               data_dir=DATA_DIR):
    app = Flask(__name__, static_folder=None)
    app.config.update(
        NAME_MAX_LENGTH=name_max_length,
        TEXT_CONTENT_TYPE=text_content_type,
        ASYNC_DELAY=async_delay,
        DATA_DIR=data_dir,
    )

    def text(body: str, compressible: bool = True) -> Response:
        resp = Response(body)
        resp.headers["Content-Type"] = app.config["TEXT_CONTENT_TYPE"]
        resp.compressible = compressible
        return resp

    def greeting() -> Response:
        name = request.args.get("name", "")
        if len(name) > app.config["NAME_MAX_LENGTH"]:
            return Response("name too long", status=400, mimetype="text/plain")
        return text(f"Hello, {name or 'world'}!")

    @app.route(f"{strings_prefix}/hello")
    def hello():
        return greeting()

    @app.route(f"{strings_prefix}/async-hello")
    def async_hello():
        time.sleep(app.config["ASYNC_DELAY"])
        return greeting()

    @app.route(f"{strings_prefix}/lines")
    def lines():
        n = request.args.get("n", "1")
        if not n.isdigit() or int(n) > 10000:
            abort(400)
        items = "".join(f"  <li>Item number: {i}</li>\n" for i in range(1, int(n) + 1))
        return text(f"<ol>\n{items}</ol>")

    @app.route(f"{math_prefix}/power-reciprocals-alt")
    def power_reciprocals_alt():
        n = request.args.get("n", "0")
        if not n.isdigit() or int(n) > 1_000_000:
            abort(400)
        # 1 - 1/2 + 1/4 - ... (n terms)
        total, term = 0.0, 1.0
        for _ in range(int(n)):
            total += term
            term *= -0.5
        return text(repr(total), compressible=False)

    @app.route("/static/<path:filename>")
    def static_file(filename):
        root = os.path.realpath(app.config["DATA_DIR"])
        full = os.path.realpath(os.path.join(root, filename))
        if not full.startswith(root + os.sep) or not os.path.isfile(full):
            abort(404)
        ext = os.path.splitext(full)[1].lower()
        ctype = _MIME_OVERRIDES.get(ext) or mimetypes.guess_type(full)[0] or "application/octet-stream"
        with open(full, "rb") as f:
            resp = Response(f.read())
        resp.headers["Content-Type"] = ctype
        resp.compressible = ctype.startswith("text/")
        return resp

    @app.after_request
    def negotiate(resp):
        if not getattr(resp, "compressible", False) or resp.status_code != 200:
            return resp
        data = resp.get_data()
        if len(data) < MIN_COMPRESS_SIZE:
            return resp
        enc = choose_encoding(request.headers.get("Accept-Encoding", ""))
        if enc is None:
            return resp
        resp.set_data(compress(data, enc))
        resp.headers["Content-Encoding"] = enc
        resp.headers["Vary"] = "Accept-Encoding"
        return resp

    return app


# ══════════════════════════════════════════════════════════════════
#  Main
# ══════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    app = create_app()
    print("\n  RefLab starting on http://0.0.0.0:5000\n")
    app.run(host="0.0.0.0", port=5000, debug=True)
