import importlib
import logging

from fastapi.testclient import TestClient

import sharecart.main
from sharecart.config import settings
from sharecart.main import app

client = TestClient(app)

SAMPLE = (
    "[Main]\n"
    "MapX=73\n"
    "MapY=1023\n"
    "Misc0=54\n"
    "PlayerName=Montréal\n"
    "Switch0=True\n"
)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_decode_upload():
    files = {"file": ("o_o.ini", SAMPLE.encode("utf-8"), "text/plain")}
    r = client.post("/decode", files=files)
    assert r.status_code == 200

    data = r.json()
    record = data["record"]
    assert record["map_x"] == 73
    assert record["map_y"] == 1023
    assert record["misc"] == [54, 0, 0, 0]
    assert record["player_name"] == "Montréal"
    assert record["switch"][0] is True
    assert data["report"]["summary"]["warnings"] == 0
    assert data["report"]["summary"]["defaulted_record"] is False

def test_decode_reports_recoveries():
    raw = b"[Main]\nMapX=abc\nColor=red\n"
    r = client.post("/decode", files={"file": ("o_o.ini", raw, "text/plain")})
    assert r.status_code == 200

    issues = [w["issue"] for w in r.json()["report"]["warnings"]]
    assert issues == ["not_u16", "unknown_key"]

def test_decode_garbage_is_default_record():
    raw = b"\xff\xfe not an ini file"
    r = client.post("/decode", files={"file": ("o_o.ini", raw, "text/plain")})
    assert r.status_code == 200

    data = r.json()
    assert data["record"]["map_x"] == 0
    assert data["record"]["player_name"] == ""
    assert data["report"]["summary"]["defaulted_record"] is True

def test_decode_strips_utf8_bom():
    raw = b"\xef\xbb\xbf" + SAMPLE.encode("utf-8")
    r = client.post("/decode", files={"file": ("o_o.ini", raw, "text/plain")})
    assert r.status_code == 200
    assert r.json()["record"]["map_x"] == 73

def test_decode_rejects_non_ini():
    r = client.post("/decode", files={"file": ("save.csv", b"[Main]\n", "text/csv")})
    assert r.status_code == 422

def test_decode_rejects_oversized_upload(monkeypatch):
    monkeypatch.setattr(settings, "max_upload_bytes", 8)
    r = client.post("/decode", files={"file": ("o_o.ini", SAMPLE.encode("utf-8"), "text/plain")})
    assert r.status_code == 413

def test_encode_record():
    r = client.post("/encode", json={"map_x": 2000, "player_name": "Ann\r\n"})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")

    lines = r.text.split("\n")
    assert lines[0] == "[Main]"
    assert lines[1] == "MapX=976"
    assert lines[7] == "PlayerName=Ann"
    assert r.text.endswith("Switch7=FALSE\n")

def test_encode_rejects_invalid_record():
    r = client.post("/encode", json={"misc": [1, 2, 3]})
    assert r.status_code == 422

    r = client.post("/encode", json={"map_y": 70000})
    assert r.status_code == 422

def test_normalize_rewrites_canonical_text():
    raw = b"; comment\r\n[main]\r\nswitch3=true\r\nmapy=7\r\n"
    r = client.post("/normalize", files={"file": ("o_o.ini", raw, "text/plain")})
    assert r.status_code == 200

    data = r.json()
    content = data["normalized_ini"]["content"]
    assert data["normalized_ini"]["encoding"] == "utf-8"
    assert "\r" not in content
    assert "MapY=7\n" in content
    assert "Switch3=TRUE\n" in content
    assert len(data["normalized_ini"]["sha256"]) == 64

def test_report_summary_fields():
    r = client.post("/decode", files={"file": ("o_o.ini", b"[Main]\n", "text/plain")})
    assert r.json()["report"]["summary"] == {"warnings": 0, "defaulted_record": False}

def test_logging_configured_on_startup_only(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))

    importlib.reload(sharecart.main)
    assert calls == []

    with TestClient(sharecart.main.app) as started:
        assert started.get("/health").status_code == 200
    assert calls == [{"level": settings.log_level.upper()}]
