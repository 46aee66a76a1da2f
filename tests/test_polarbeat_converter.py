import logging

import pandas as pd
import pytest

from conftest import POLAR_SAMPLE_HEADER, POLAR_SUMMARY_HEADER, build_polar_csv, clock
from polarbeat_converter import (
    HeartRateSample,
    PolarExportError,
    convert_polarbeat,
    downsample,
    format_date,
    get_total_seconds,
    max_heart_rate,
    note_filename,
    parse_export,
    render_session_note,
)


def sample_frame(seconds, hr_start=80):
    return pd.DataFrame({
        "Time": [clock(s) for s in seconds],
        "HR (bpm)": [str(hr_start + s) for s in seconds],
    })


@pytest.mark.parametrize("timestamp, expected", [
    ("00:00:00", 0),
    ("00:00:30", 30),
    ("00:01:30", 90),
    ("01:02:03", 3723),
    ("10:00:00", 36000),
])
def test_get_total_seconds(timestamp, expected):
    assert get_total_seconds(timestamp) == expected


def test_format_date_reorders_by_position():
    assert format_date("05-03-2024") == "2024-03-05"


def test_format_date_does_not_validate():
    assert format_date("99-99-9999") == "9999-99-99"


def test_downsample_keeps_every_30th_second():
    samples = downsample(sample_frame(range(120)))

    assert [s.time for s in samples] == ["00:00:00", "00:00:30", "00:01:00", "00:01:30"]
    assert [s.heart_rate for s in samples] == [80, 110, 140, 170]


def test_max_is_taken_after_downsampling():
    samples = downsample(sample_frame(range(120)))

    # the 1 Hz series peaks at 199 bpm (second 119)
    assert max_heart_rate(samples) == 170


def test_downsample_drifts_when_seconds_are_skipped():
    samples = downsample(sample_frame([1, 2, 31, 60, 61]))
    assert [s.time for s in samples] == ["00:01:00"]


def test_max_heart_rate_without_samples_raises():
    samples = downsample(sample_frame([1, 2, 3]))
    assert samples == []
    with pytest.raises(PolarExportError, match="No heart-rate samples"):
        max_heart_rate(samples)


def test_downsample_rejects_bad_time():
    frame = pd.DataFrame({"Time": ["00:00:00", "garbage"], "HR (bpm)": ["80", "81"]})
    with pytest.raises(PolarExportError, match="Invalid 'Time'"):
        downsample(frame)


def test_downsample_rejects_missing_heart_rate_on_boundary():
    frame = pd.DataFrame({"Time": ["00:00:00", "00:00:30"], "HR (bpm)": ["80", ""]})
    with pytest.raises(PolarExportError, match="00:00:30"):
        downsample(frame)


def test_parse_export_builds_session():
    session = parse_export(build_polar_csv())

    assert session.date == "05-03-2024"
    assert session.start_time == "18:30:00"
    assert session.duration == "00:02:00"
    assert session.hr_avg == "121"
    assert session.calories == "350"
    assert session.hr_max == 170
    assert session.samples == (
        HeartRateSample("00:00:00", 80),
        HeartRateSample("00:00:30", 110),
        HeartRateSample("00:01:00", 140),
        HeartRateSample("00:01:30", 170),
    )


def test_parse_export_handles_crlf_and_blank_lines():
    text = build_polar_csv(newline="\r\n") + "\r\n\r\n"
    session = parse_export(text)
    assert session.calories == "350"
    assert len(session.samples) == 4


def test_parse_export_rejects_short_summary_row():
    text = build_polar_csv(summary_row="Jane Doe,MARTIAL_ARTS,05-03-2024")
    with pytest.raises(PolarExportError, match="Summary row has 3 column"):
        parse_export(text)


def test_parse_export_rejects_missing_hr_column():
    text = "\n".join([
        POLAR_SUMMARY_HEADER,
        "Jane Doe,MARTIAL_ARTS,05-03-2024,18:30:00,00:02:00,,121,,,,,350,40",
        "Sample rate,Time,Speed (km/h)",
        "1,00:00:00,0",
    ])
    with pytest.raises(PolarExportError, match="HR \\(bpm\\)"):
        parse_export(text)


def test_parse_export_rejects_truncated_file():
    with pytest.raises(PolarExportError):
        parse_export(POLAR_SUMMARY_HEADER + "\n" + POLAR_SAMPLE_HEADER + "\n")


def test_render_session_note():
    session = parse_export(build_polar_csv())
    content = render_session_note(session)

    assert note_filename(session) == "2024-03-05 - Taekwondo.md"
    assert content.startswith("---\ntype: exercise\ndate: 2024-03-05\n")
    assert "exercise: Taekwondo\n" in content
    assert "hr-avg: 121\n" in content
    assert "hr-max: 170\n" in content
    assert "hr-data:\n  - { time: 00:00:00, hr: 80 }\n" in content
    assert "  - { time: 00:01:30, hr: 170 }\n---\n[[2024-03-05]]\n" in content
    assert 'start: ["min", 128]' in content
    assert "{{" not in content


def test_convert_polarbeat_writes_note(polar_import_dir, tmp_path):
    out = tmp_path / "nested" / "out"

    assert convert_polarbeat(polar_import_dir, out) is True

    note = out / "2024-03-05 - Taekwondo.md"
    assert note.is_file()
    assert "hr-max: 170" in note.read_text(encoding="utf-8")


def test_convert_polarbeat_is_idempotent(polar_import_dir, tmp_path):
    out = tmp_path / "out"
    convert_polarbeat(polar_import_dir, out)
    first = (out / "2024-03-05 - Taekwondo.md").read_bytes()

    convert_polarbeat(polar_import_dir, out)
    assert (out / "2024-03-05 - Taekwondo.md").read_bytes() == first


def test_convert_polarbeat_skips_bad_export(polar_import_dir, tmp_path, caplog):
    (polar_import_dir / "broken.csv").write_text("only,one,line\n", encoding="utf-8")
    (polar_import_dir / "readme.txt").write_text("not an export", encoding="utf-8")
    out = tmp_path / "out"

    with caplog.at_level(logging.ERROR, logger="polarbeat"):
        assert convert_polarbeat(polar_import_dir, out) is False

    assert [p.name for p in out.iterdir()] == ["2024-03-05 - Taekwondo.md"]
    assert "broken.csv" in caplog.text


def test_convert_polarbeat_missing_import_path(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger="polarbeat"):
        assert convert_polarbeat(tmp_path / "missing", tmp_path / "out") is False
    assert "does not exist" in caplog.text
    assert not (tmp_path / "out").exists()


def test_convert_polarbeat_same_date_exports_keep_last_file(tmp_path, caplog):
    import_dir = tmp_path / "polar_in"
    import_dir.mkdir()
    (import_dir / "a_morning.csv").write_text(build_polar_csv(seconds=range(3600)), encoding="utf-8")
    (import_dir / "b_evening.csv").write_text(build_polar_csv(seconds=range(60)), encoding="utf-8")
    out = tmp_path / "out"
    expected = render_session_note(parse_export(build_polar_csv(seconds=range(60))))

    for _ in range(3):
        with caplog.at_level(logging.WARNING, logger="note_writer"):
            assert convert_polarbeat(import_dir, out) is True
        assert [p.name for p in out.iterdir()] == ["2024-03-05 - Taekwondo.md"]
        assert (out / "2024-03-05 - Taekwondo.md").read_text(encoding="utf-8") == expected

    assert "Replacing queued note" in caplog.text
