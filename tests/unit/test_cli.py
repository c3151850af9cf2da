"""Tests for the salary-calc CLI commands.

The service is mocked at urlopen; config lives in tmp_path.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
import yaml
from click.testing import CliRunner

from salarycalc.cli.__main__ import cli


def make_response_data(gross: float = 5000, net: float = 4200) -> dict:
    return {
        "calculationId": "calc-42",
        "grossPerCadence": gross,
        "netPerCadence": net,
        "currency": "USD",
        "rulePackVersion": "us-2025.1",
        "lineItems": [
            {"name": "Federal Income Tax", "amount": 5000},
            {"name": "FICA (Social Security)", "amount": 3720},
            {"name": "Medicare", "amount": 870},
            {"name": "Employee Pension", "amount": 3000},
            {"name": "Union Dues", "amount": 200},
        ],
        "explanation": [{"id": "note", "text": "2025 federal brackets applied"}],
    }


def fake_urlopen(data: dict):
    resp = MagicMock()
    resp.status = 200
    resp.read.return_value = json.dumps(data).encode()
    context = MagicMock()
    context.__enter__.return_value = resp
    context.__exit__.return_value = False
    return MagicMock(return_value=context)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("SALARY_CALC_CONFIG_PATH", str(config_dir))
    monkeypatch.delenv("SALARY_CALC_API_URL", raising=False)
    return config_dir


class TestCalculate:
    def test_dry_run_prints_payload(self, isolated_config):
        runner = CliRunner()
        result = runner.invoke(cli, [
            "calculate", "85,000", "--state", "California", "--frequency", "monthly",
            "--pension-percent", "5", "--allowances", "0", "--dry-run",
        ])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["annualSalary"] == 85000.0
        assert payload["cadence"] == "MONTHLY"
        assert payload["pretax"] == {"pensionPercent": 0.05}
        assert payload["countryOptions"] == {"US": {"state": "CA", "filingStatus": "SINGLE"}}

    def test_profile_supplies_defaults(self, isolated_config):
        (isolated_config / "profile.yaml").write_text(yaml.dump({
            "state": "NY",
            "filing_status": "married",
            "pay_frequency": "weekly",
            "allowances": 2,
            "tax_year": 2026,
        }))

        runner = CliRunner()
        result = runner.invoke(cli, ["calculate", "90000", "--dry-run"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["taxYear"] == 2026
        assert payload["cadence"] == "WEEKLY"
        assert payload["countryOptions"]["US"] == {"state": "NY", "filingStatus": "MARRIED", "allowances": 2}

    def test_options_override_profile(self, isolated_config):
        (isolated_config / "profile.yaml").write_text(yaml.dump({"state": "NY"}))

        runner = CliRunner()
        result = runner.invoke(cli, ["calculate", "90000", "--state", "TX", "--dry-run"])

        assert json.loads(result.output)["countryOptions"]["US"]["state"] == "TX"

    def test_broken_profile_yaml(self, isolated_config):
        (isolated_config / "profile.yaml").write_text("state: [CA\n")

        result = CliRunner().invoke(cli, ["calculate", "60000", "--state", "CA", "--dry-run"])

        assert result.exit_code == 1
        assert not isinstance(result.exception, yaml.YAMLError)
        assert "Invalid YAML in" in result.output
        assert "profile.yaml" in result.output

    def test_broken_settings_json(self, isolated_config):
        (isolated_config / "settings.json").write_text("{not json")

        result = CliRunner().invoke(cli, ["calculate", "60000", "--state", "CA", "--dry-run"])

        assert result.exit_code == 1
        assert not isinstance(result.exception, json.JSONDecodeError)
        assert "Invalid JSON in" in result.output
        assert "settings.json" in result.output

    def test_invalid_salary(self, isolated_config):
        runner = CliRunner()
        result = runner.invoke(cli, ["calculate", "lots", "--state", "CA"])

        assert result.exit_code == 1
        assert "Annual salary must be a positive number" in result.output

    def test_missing_state(self, isolated_config):
        runner = CliRunner()
        result = runner.invoke(cli, ["calculate", "50000"])

        assert result.exit_code == 1
        assert "Unable to determine state code" in result.output

    def test_json_output(self, isolated_config):
        runner = CliRunner()
        urlopen = fake_urlopen(make_response_data())

        with patch("urllib.request.urlopen", urlopen):
            result = runner.invoke(cli, [
                "calculate", "60000", "--state", "CA", "--frequency", "monthly", "--json",
            ])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["gross_pay"]["annual"] == 60000
        assert data["taxes"]["total_taxes"] == 9590
        assert data["taxes"]["fica"]["total"] == 4590
        assert data["deductions"]["pre_tax_items"] == [{"name": "Employee Pension", "amount": 3000.0}]
        assert data["net_pay"]["take_home_percentage"] == pytest.approx(84.0)
        assert urlopen.call_args[0][0].full_url == "http://localhost:8080/v1/calculate"

    def test_api_url_option(self, isolated_config):
        runner = CliRunner()
        urlopen = fake_urlopen(make_response_data())

        with patch("urllib.request.urlopen", urlopen):
            runner.invoke(cli, [
                "calculate", "60000", "--state", "CA", "--api-url", "https://calc.example.com", "--json",
            ])

        assert urlopen.call_args[0][0].full_url == "https://calc.example.com/v1/calculate"

    def test_rich_output(self, isolated_config):
        runner = CliRunner()

        with patch("urllib.request.urlopen", fake_urlopen(make_response_data())):
            result = runner.invoke(cli, ["calculate", "60000", "--state", "CA", "--frequency", "monthly"])

        assert result.exit_code == 0, result.output
        assert "Take home: 84.0%" in result.output
        assert "$9,590.00" in result.output
        assert "Employee Pension" in result.output
        assert "Union Dues" not in result.output
        assert "rule pack us-2025.1" in result.output

    def test_service_error_reported(self, isolated_config):
        import io
        import urllib.error

        error = urllib.error.HTTPError(
            "http://localhost:8080/v1/calculate", 400, "Bad Request", {},
            io.BytesIO(b"Unsupported tax year 1999"),
        )
        runner = CliRunner()

        with patch("urllib.request.urlopen", MagicMock(side_effect=error)):
            result = runner.invoke(cli, ["calculate", "60000", "--state", "CA", "--year", "1999"])

        assert result.exit_code == 1
        assert "Unsupported tax year 1999" in result.output


class TestBreakdownCommand:
    def test_classifies_saved_response(self, tmp_path, isolated_config):
        response_file = tmp_path / "response.json"
        response_file.write_text(json.dumps(make_response_data(gross=60000, net=50410)))

        runner = CliRunner()
        result = runner.invoke(cli, ["breakdown", str(response_file), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["taxes"]["effective_tax_rate"] == pytest.approx(9590 / 60000 * 100)
        assert data["gross_pay"]["cadence_label"] == "annual"

    def test_cadence_option(self, tmp_path, isolated_config):
        response_file = tmp_path / "response.json"
        response_file.write_text(json.dumps(make_response_data()))

        runner = CliRunner()
        result = runner.invoke(cli, ["breakdown", str(response_file), "--cadence", "biweekly", "--json"])

        assert json.loads(result.output)["gross_pay"]["annual"] == 5000 * 26

    def test_malformed_file(self, tmp_path, isolated_config):
        response_file = tmp_path / "response.json"
        response_file.write_text("not json")

        runner = CliRunner()
        result = runner.invoke(cli, ["breakdown", str(response_file)])

        assert result.exit_code == 1
        assert "Failed to decode response" in result.output


class TestStatesCommand:
    def test_lists_all(self):
        result = CliRunner().invoke(cli, ["states"])
        assert result.exit_code == 0
        assert len(result.output.strip().splitlines()) == 50
        assert "CA  California" in result.output

    def test_resolves_query(self):
        result = CliRunner().invoke(cli, ["states", "new york"])
        assert result.output.strip() == "NY  New York"

    def test_unknown_query(self):
        result = CliRunner().invoke(cli, ["states", "Gondor"])
        assert result.exit_code == 1
        assert "Unknown state" in result.output


class TestSettingsCommands:
    def test_set_and_show(self, isolated_config):
        runner = CliRunner()

        result = runner.invoke(cli, ["settings", "set", "api_url", "https://calc.example.com"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["settings", "show"])
        assert "api_url: https://calc.example.com" in result.output

    def test_unknown_key(self, isolated_config):
        result = CliRunner().invoke(cli, ["settings", "set", "colour", "blue"])
        assert result.exit_code == 1
        assert "Unknown setting" in result.output

    def test_bad_timeout(self, isolated_config):
        result = CliRunner().invoke(cli, ["settings", "set", "timeout", "0"])
        assert result.exit_code == 1
        assert "greater than 0" in result.output

    def test_unset(self, isolated_config):
        runner = CliRunner()
        runner.invoke(cli, ["settings", "set", "timeout", "12"])
        result = runner.invoke(cli, ["settings", "unset", "timeout"])
        assert "Cleared timeout" in result.output


class TestProfileCommands:
    def test_set_state_normalizes_to_code(self, isolated_config):
        result = CliRunner().invoke(cli, ["profile", "set", "state", "new jersey"])

        assert result.exit_code == 0, result.output
        data = yaml.safe_load((isolated_config / "profile.yaml").read_text())
        assert data == {"state": "NJ"}

    def test_set_rejects_bad_choice(self, isolated_config):
        result = CliRunner().invoke(cli, ["profile", "set", "pay_frequency", "daily"])
        assert result.exit_code == 1
        assert "Expected one of" in result.output

    def test_set_rejects_bad_type(self, isolated_config):
        result = CliRunner().invoke(cli, ["profile", "set", "allowances", "two"])
        assert result.exit_code == 1

    def test_show(self, isolated_config):
        runner = CliRunner()
        runner.invoke(cli, ["profile", "set", "pension_percent", "5"])

        result = runner.invoke(cli, ["profile", "show"])

        assert "pension_percent: 5.0" in result.output

    def test_show_without_profile(self, isolated_config):
        result = CliRunner().invoke(cli, ["profile", "show"])
        assert "Not found" in result.output
