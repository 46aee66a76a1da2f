import logging

import main


def test_recipe_table():
    assert set(main.RECIPES) == {
        "convert-polarbeat",
        "convert-fixtures",
        "generate-daily-summaries",
        "generate-monthly-summaries",
    }


def test_unknown_recipe_exits_non_zero(caplog):
    with caplog.at_level(logging.ERROR, logger="main"):
        assert main.main(["make-coffee"]) == 1
    assert 'Recipe "make-coffee" not found' in caplog.text


def test_daily_summaries_recipe(tmp_path):
    assert main.main(["generate-daily-summaries", "2023", str(tmp_path)]) == 0
    assert len(list(tmp_path.iterdir())) == 365


def test_monthly_summaries_recipe(tmp_path):
    assert main.main(["generate-monthly-summaries", "2024", str(tmp_path)]) == 0
    assert (tmp_path / "2024-02-summary.md").is_file()


def test_year_recipe_needs_a_year(caplog):
    with caplog.at_level(logging.ERROR, logger="main"):
        assert main.main(["generate-daily-summaries"]) == 1
    assert "needs a year" in caplog.text


def test_invalid_year_exits_non_zero(tmp_path):
    assert main.main(["generate-monthly-summaries", "soon", str(tmp_path)]) == 1


def test_polarbeat_recipe(polar_import_dir, tmp_path):
    out = tmp_path / "out"
    assert main.main(["convert-polarbeat", str(polar_import_dir), str(out)]) == 0
    assert (out / "2024-03-05 - Taekwondo.md").is_file()


def test_fixtures_recipe(fixture_feed, tmp_path):
    out = tmp_path / "out"
    assert main.main(["convert-fixtures", str(fixture_feed), str(out)]) == 0
    assert (out / "People" / "Michael Oliver.md").is_file()


def test_failed_recipe_exits_non_zero(tmp_path):
    assert main.main(["convert-fixtures", str(tmp_path / "missing.json"), str(tmp_path)]) == 1
