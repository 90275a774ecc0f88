import hashlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse

from .codec import decode_with_report, encode
from .config import settings
from .models import (
    DecodeReport,
    DecodeResponse,
    HealthResponse,
    NormalizeResponse,
    Record,
    ReportSummary,
)

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(level=settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(
    lifespan=lifespan,
    title=settings.app_name,
    description="Deterministic Sharecart (o_o.ini) save-state codec",
    version="0.1.0",
)

_UTF8_BOM = b"\xef\xbb\xbf"


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


async def _read_ini_upload(file: UploadFile) -> str:
    if not (file.filename or "").lower().endswith(".ini"):
        raise HTTPException(status_code=422, detail="Only .ini files are supported")

    raw = await file.read(settings.max_upload_bytes + 1)
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds {settings.max_upload_bytes} bytes",
        )

    # Invalid bytes become U+FFFD here; the decoder drops them from PlayerName
    # and any other field they land in fails to parse.
    encoding = "utf-8-sig" if raw.startswith(_UTF8_BOM) else "utf-8"
    return raw.decode(encoding, errors="replace")


def _report(warnings) -> DecodeReport:
    defaulted = any(w.action == "defaulted_record" for w in warnings)
    return DecodeReport(
        summary=ReportSummary(warnings=len(warnings), defaulted_record=defaulted),
        warnings=warnings,
    )


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/decode", response_model=DecodeResponse)
async def decode_ini(file: UploadFile = File(...)):
    text = await _read_ini_upload(file)
    record, warnings = decode_with_report(text)
    logger.info("decoded %s with %d warning(s)", file.filename, len(warnings))
    return DecodeResponse(record=record, report=_report(warnings))


@app.post("/encode", response_class=PlainTextResponse)
def encode_record(record: Record):
    logger.info("encoding record")
    return PlainTextResponse(encode(record))


@app.post("/normalize", response_model=NormalizeResponse)
async def normalize_ini(file: UploadFile = File(...)):
    text = await _read_ini_upload(file)
    record, warnings = decode_with_report(text)
    content = encode(record)
    logger.info("normalized %s with %d warning(s)", file.filename, len(warnings))
    return {
        "normalized_ini": {
            "sha256": _sha256_hex(content.encode("utf-8")),
            "encoding": "utf-8",
            "content": content,
        },
        "report": _report(warnings),
    }
