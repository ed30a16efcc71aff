import logging
import os

from fastapi import FastAPI, UploadFile, File, Form, HTTPException

from bpmscan.batch import BatchRunner, find_audio_files
from bpmscan.config import TempoConfig
from bpmscan.decoding import DecodeError, decode_stream
from bpmscan.dsp_engine.pipeline import analyze_audio
from bpmscan.models import FileOutcome, ScanResponse, TempoResponse
from bpmscan.sink import MemorySink

logger = logging.getLogger("bpmscan")

app = FastAPI(title="bpmscan tempo service")


def _config() -> TempoConfig:
    try:
        return TempoConfig.from_env()
    except ValueError as exc:
        logger.error("[HTTP] Invalid BPMSCAN_* configuration: %s", exc)
        raise HTTPException(
            status_code=500,
            detail={"error": "INVALID_CONFIG", "message": str(exc)},
        ) from exc


def _inside_root(directory: str, root: str) -> bool:
    real_dir = os.path.realpath(directory)
    real_root = os.path.realpath(root)
    return os.path.commonpath([real_dir, real_root]) == real_root


@app.get("/health")
async def health():
    """Lightweight health endpoint for uptime checks."""

    return {"status": "ok"}


@app.post("/tempo", response_model=TempoResponse)
async def tempo(file: UploadFile = File(...)):
    """Estimate the tempo of a single uploaded file.

    Decode failures (unreadable container, zero frames or channels,
    short reads) are returned as 400 with the same message the batch
    scanner prints for that file.
    """

    name = file.filename or "upload"
    try:
        audio = decode_stream(file.file, name)
    except DecodeError as exc:
        logger.warning("[HTTP] Rejected upload %s: %s", name, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    finally:
        try:
            file.file.close()
        except OSError:  # pragma: no cover - best effort
            pass

    report = analyze_audio(audio, _config())
    return TempoResponse(**report.to_dict())


@app.post("/scan", response_model=ScanResponse)
async def scan(directory: str = Form(...)):
    """Scan a server-side directory and return one outcome per audio file.

    Only directories under ``BPMSCAN_SCAN_ROOT`` (default: the service's
    working directory) may be scanned; anything else is a 403. Files that
    fail are listed with their error; they never fail the request as a
    whole.
    """

    config = _config()
    root = config.scan_root or os.getcwd()
    if not _inside_root(directory, root):
        logger.warning("[HTTP] Refused scan outside %s: %s", root, directory)
        raise HTTPException(status_code=403, detail=f"Directory is outside the scan root: {directory}")

    try:
        paths = find_audio_files(directory, config.extensions)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    runner = BatchRunner(config=config, sink=MemorySink())
    try:
        results = runner.run_files(paths)
    except Exception as exc:  # pragma: no cover - defensive, surfaces via HTTP detail
        logger.exception("[HTTP] Scan failed for %s: %s", directory, exc)
        raise HTTPException(status_code=500, detail={"error": "SCAN_FAILED", "message": str(exc)}) from exc

    outcomes = [
        FileOutcome(
            path=r.path,
            ok=r.ok,
            bpm=r.report.bpm if r.report is not None else None,
            error=r.error,
        )
        for r in sorted(results, key=lambda r: r.path)
    ]
    return ScanResponse(
        directory=directory,
        total=len(outcomes),
        failed=sum(1 for o in outcomes if not o.ok),
        found=[os.path.basename(p) for p in paths],
        results=outcomes,
    )
