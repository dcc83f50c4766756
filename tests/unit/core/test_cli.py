"""
Tests for the ScoreBoard command-line interface
"""

import json

import pytest
from click.testing import CliRunner

from core.cli import cli

pytestmark = pytest.mark.unit


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def stats_file(runner, tmp_path):
    path = tmp_path / "stats.json"
    result = runner.invoke(cli, ["stats", "--seed", "5", "--date", "2024-03-15"])
    assert result.exit_code == 0, result.output
    path.write_text(result.output)
    return path


class TestCLI:
    def test_synthesize(self, runner):
        result = runner.invoke(cli, ["synthesize", "--count", "4", "--target", "72", "--seed", "1"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["target_score"] == 72.0
        assert len(data["factors"]) == 4
        assert abs(data["weighted_sum"] - 72.0) <= 0.1

    def test_synthesize_entity_vocabulary(self, runner):
        result = runner.invoke(cli, ["synthesize", "--target", "50", "--entity", "lead", "--seed", "1"])
        assert result.exit_code == 0, result.output
        names = {factor["name"] for factor in json.loads(result.output)["factors"]}
        assert "Location Value" not in names

    def test_synthesize_out_of_range(self, runner):
        result = runner.invoke(cli, ["synthesize", "--target", "140"])
        assert result.exit_code == 1
        assert "INVALID_RANGE" in result.output

    def test_synthesize_too_many_factors(self, runner):
        result = runner.invoke(cli, ["synthesize", "--count", "7", "--target", "50", "--entity", "lead"])
        assert result.exit_code == 1
        assert "INSUFFICIENT_VOCABULARY" in result.output

    def test_generate(self, runner):
        result = runner.invoke(cli, ["generate", "--entity", "agent", "--count", "3", "--top", "--seed", "9"])

        assert result.exit_code == 0, result.output
        records = json.loads(result.output)
        scores = [record["score"] for record in records]
        assert scores == sorted(scores, reverse=True)
        assert {record["entity_type"] for record in records} == {"agent"}

    def test_generate_all(self, runner):
        result = runner.invoke(cli, ["generate", "--count", "2", "--seed", "9"])
        assert result.exit_code == 0, result.output
        assert len(json.loads(result.output)) == 6

    def test_generate_top_requires_entity(self, runner):
        result = runner.invoke(cli, ["generate", "--top"])
        assert result.exit_code == 2

    def test_reshape(self, runner, stats_file):
        result = runner.invoke(cli, ["reshape", str(stats_file), "--date", "2024-03-15"])

        assert result.exit_code == 0, result.output
        series = json.loads(result.output)
        assert len(series["score_distribution"]) == 5
        assert [row["month"] for row in series["score_trend"]][-1] == "Mar"

    def test_derive(self, runner, stats_file):
        result = runner.invoke(cli, ["derive", str(stats_file)])

        assert result.exit_code == 0, result.output
        kpis = json.loads(result.output)
        assert [kpi["title"] for kpi in kpis][1] == "Conversion Rate"
        assert kpis[0]["tier"] in {"error", "warning", "primary", "success"}

    def test_reshape_invalid_json(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        result = runner.invoke(cli, ["reshape", str(path)])
        assert result.exit_code == 2

    def test_reshape_malformed_record(self, runner, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text(json.dumps({"scoreDistribution": [{"_id": {"range": "0-20", "type": "lead"}, "count": -1}]}))
        result = runner.invoke(cli, ["reshape", str(path)])
        assert result.exit_code == 1
        assert "VALIDATION_ERROR" in result.output

    def test_reshape_null_dimension(self, runner, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text(json.dumps({"scoreDistribution": [{"_id": {"range": "0-20", "type": None}, "count": 2}]}))
        result = runner.invoke(cli, ["reshape", str(path), "--date", "2024-03-15"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["score_distribution"][0]["lead"] == 0

    def test_env_info(self, runner):
        result = runner.invoke(cli, ["env-info"])
        assert result.exit_code == 0
        assert "ScoreBoard v" in result.output
