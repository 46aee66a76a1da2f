import json

import pytest

POLAR_SUMMARY_HEADER = (
    "Name,Sport,Date,Start time,Duration,Total distance (km),Average heart rate (bpm),"
    "Average speed (km/h),Max speed (km/h),Average pace (min/km),Max pace (min/km),"
    "Calories,Fat percentage of calories(%)"
)
POLAR_SUMMARY_ROW = "Jane Doe,MARTIAL_ARTS,05-03-2024,18:30:00,00:02:00,,121,,,,,350,40"
POLAR_SAMPLE_HEADER = "Sample rate,Time,HR (bpm),Speed (km/h)"


def clock(seconds: int) -> str:
    return f"{seconds // 3600:02d}:{seconds % 3600 // 60:02d}:{seconds % 60:02d}"


def build_polar_csv(seconds=range(120), hr_start=80, summary_row=POLAR_SUMMARY_ROW, newline="\n"):
    """Polar Beat export with one sample per second; HR rises by 1 bpm per second."""
    lines = [POLAR_SUMMARY_HEADER, summary_row, POLAR_SAMPLE_HEADER]
    for i, s in enumerate(seconds):
        rate = "1" if i == 0 else ""
        lines.append(f"{rate},{clock(s)},{hr_start + s},")
    return newline.join(lines) + newline


def make_match(home="Arsenal", away="Man City", utc_date="2024-08-17T14:00:00Z",
               matchday=1, referees=("Michael Oliver",), half=(1, 0), full=(2, 1)):
    return {
        "homeTeam": {"shortName": home},
        "awayTeam": {"shortName": away},
        "utcDate": utc_date,
        "matchday": matchday,
        "score": {
            "halfTime": {"home": half[0], "away": half[1]},
            "fullTime": {"home": full[0], "away": full[1]},
        },
        "referees": [{"name": r} for r in referees],
    }


@pytest.fixture
def polar_import_dir(tmp_path):
    import_dir = tmp_path / "polar_in"
    import_dir.mkdir()
    (import_dir / "session.csv").write_text(build_polar_csv(), encoding="utf-8")
    return import_dir


@pytest.fixture
def fixture_feed(tmp_path):
    feed = {
        "matches": [
            make_match("Man United", "Fulham", "2024-08-16T19:00:00Z", 1, ("Robert Jones",)),
            make_match("Arsenal", "Wolverhampton", "2024-08-17T14:00:00Z", 1, ("John Brooks",)),
            make_match("Brighton Hove", "Man United", "2024-08-24T11:30:00Z", 2, ()),
            make_match("Man City", "Ipswich Town", "2024-08-24T14:00:00Z", 2, ("Robert Jones",)),
            make_match("Tottenham", "Everton", "2024-08-24T14:00:00Z", 2, ("Michael Oliver",),
                       half=(None, None), full=(None, None)),
        ]
    }
    path = tmp_path / "fixtures.json"
    path.write_text(json.dumps(feed), encoding="utf-8")
    return path
