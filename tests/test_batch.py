import io
import threading

import pytest
import soundfile as sf

from conftest import click_track

import bpmscan.batch as batch
from bpmscan.batch import BatchRunner, FileResult, analyze_file, find_audio_files
from bpmscan.config import TempoConfig
from bpmscan.sink import ConsoleSink, MemorySink

EXPECTED_BPM = f"{120.0 / 35.0:g}"


@pytest.fixture
def mixed_dir(tmp_path, write_wav, corrupt_wav):
    good = write_wav("good.wav", click_track(n_clicks=6))
    (tmp_path / "notes.txt").write_text("not audio")
    (tmp_path / "sub.wav").mkdir()
    return tmp_path, good, corrupt_wav


def test_find_audio_files_filters_by_extension(mixed_dir, tmp_path):
    directory, good, broken = mixed_dir
    (tmp_path / "loud.MP3").write_bytes(b"")
    found = find_audio_files(str(directory))
    assert found == sorted([good, broken, str(tmp_path / "loud.MP3")])


def test_find_audio_files_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        find_audio_files(str(tmp_path / "absent"))


def test_analyze_file_never_raises_for_bad_input(tmp_path, corrupt_wav):
    missing = analyze_file(str(tmp_path / "gone.wav"))
    assert not missing.ok
    assert missing.error == f"File not found: {tmp_path / 'gone.wav'}"

    broken = analyze_file(corrupt_wav)
    assert not broken.ok
    assert broken.error.startswith("Error opening file:")


@pytest.mark.parametrize("workers", [1, 4])
def test_corrupt_file_does_not_affect_valid_one(mixed_dir, workers):
    directory, good, broken = mixed_dir
    sink = MemorySink()
    runner = BatchRunner(TempoConfig(max_workers=workers), sink)

    results = {r.path: r for r in runner.run(str(directory))}

    assert set(results) == {good, broken}
    assert results[good].ok
    assert results[good].report.bpm == pytest.approx(120.0 / 35.0, rel=1e-6)
    assert not results[broken].ok

    assert "Found: good.wav" in sink.lines
    assert "Found: broken.wav" in sink.lines
    assert f"Detected BPM for {good}: {EXPECTED_BPM}" in sink.lines
    assert len(sink.errors) == 1
    assert sink.errors[0].startswith(f"Error opening file: {broken}")


def test_announcements_precede_results(mixed_dir):
    directory, _, _ = mixed_dir
    sink = MemorySink()
    BatchRunner(TempoConfig(max_workers=2), sink).run(str(directory))
    assert [line.startswith("Found: ") for line in sink.lines] == [True, True, False, False]


def test_worker_crash_is_isolated(mixed_dir, monkeypatch):
    directory, good, broken = mixed_dir
    other = str(directory / "other.wav")
    sf.write(other, click_track(n_clicks=4), 44100, subtype="FLOAT")

    real = batch.analyze_audio

    def flaky(audio, config=None):
        if audio.path == other:
            raise RuntimeError("boom")
        return real(audio, config)

    monkeypatch.setattr(batch, "analyze_audio", flaky)
    sink = MemorySink()
    results = {r.path: r for r in BatchRunner(TempoConfig(max_workers=3), sink).run(str(directory))}

    assert results[good].ok
    assert results[other].error == f"Error processing {other}: boom"
    assert not results[broken].ok


def test_empty_directory(tmp_path):
    sink = MemorySink()
    assert BatchRunner(TempoConfig(), sink).run(str(tmp_path)) == []
    assert sink.lines == []


def test_format_line_for_sentinel():
    from bpmscan.dsp_engine.pipeline import TempoReport

    report = TempoReport("a.wav", 0.0, 0.0, 1, 44100, 10, 1, 0.0)
    assert FileResult("a.wav", report=report).format_line() == "Detected BPM for a.wav: 0"


def test_console_sink_routes_errors():
    out, err = io.StringIO(), io.StringIO()
    sink = ConsoleSink(out, err)
    sink.write("Found: a.wav")
    sink.write("File not found: b.wav", error=True)
    assert out.getvalue() == "Found: a.wav\n"
    assert err.getvalue() == "File not found: b.wav\n"


def test_concurrent_writes_keep_lines_whole():
    sink = MemorySink()

    def writer(n):
        for i in range(200):
            sink.write(f"worker {n} line {i}")

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(sink.lines) == 1600
    assert all(line.startswith("worker ") for line in sink.lines)


def test_sink_subclass_must_implement_emit():
    from bpmscan.sink import OutputSink

    class Incomplete(OutputSink):
        pass

    with pytest.raises(TypeError):
        Incomplete()
