from unittest.mock import MagicMock

import requests

from src.rndc_admin.services.api_client import ErrorKind
from src.rndc_admin.services.image_upload import ImageUploader


def _response(status, body):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body
    return resp


def _uploader(http):
    return ImageUploader("https://img.test/upload", "preset", http=http)


def test_upload_returns_secure_url(tmp_path):
    img = tmp_path / "recibo.png"
    img.write_bytes(b"\x89PNG")
    http = MagicMock(spec=requests.Session)
    http.post.return_value = _response(200, {"secure_url": "https://img.test/r.png"})
    res = _uploader(http).upload(img)
    assert res.value == "https://img.test/r.png"
    kwargs = http.post.call_args.kwargs
    assert kwargs["data"] == {"upload_preset": "preset"}
    assert kwargs["files"]["file"][0] == "recibo.png"


def test_upload_failures(tmp_path):
    img = tmp_path / "recibo.png"
    img.write_bytes(b"\x89PNG")
    http = MagicMock(spec=requests.Session)
    http.post.return_value = _response(400, {})
    assert _uploader(http).upload(img).error.kind == ErrorKind.UPLOAD
    http.post.side_effect = requests.ConnectionError()
    assert _uploader(http).upload(img).error.kind == ErrorKind.NETWORK
    assert _uploader(http).upload(tmp_path / "missing.png").error.kind == ErrorKind.UPLOAD
