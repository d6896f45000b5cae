import json

from app.services.interactions.__main__ import main, parse_args
from app.services.interactions.models import OrganFunction


class TestCommandLine:

    def test_parse_args(self):
        drugs, factors, as_json = parse_args([
            "prog", "warfarin", "--age", "70", "fluconazole", "--renal", "Mild", "--pregnant",
        ])

        assert drugs == ["warfarin", "fluconazole"]
        assert factors.age == 70
        assert factors.renal_function == OrganFunction.MILD
        assert factors.hepatic_function is None
        assert factors.pregnancy is True
        assert as_json is False

    def test_documentation_output(self, capsys):
        assert main(["prog", "warfarin", "fluconazole"]) == 0

        out = capsys.readouterr().out
        assert "Risk level: HIGH" in out
        assert "Risk score: 60/100" in out
        assert "Risk factors: No significant risk factors identified" in out

    def test_risk_factors_printed(self, capsys):
        assert main(["prog", "warfarin", "fluconazole", "--age", "70"]) == 0
        assert "Risk factors: Advanced Age (70)" in capsys.readouterr().out

    def test_json_output(self, capsys):
        assert main(["prog", "ceftriaxone", "calcium", "--json"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["sufficient_data"] is True
        assert payload["assessment"]["overall_risk"] == "critical"
        assert payload["assessment"]["risk_score"] == 100.0

    def test_single_drug_prints_message(self, capsys):
        assert main(["prog", "warfarin"]) == 0
        assert "Select at least two medications" in capsys.readouterr().out

    def test_bad_arguments(self, capsys):
        assert main(["prog", "warfarin", "fluconazole", "--renal", "terrible"]) == 2
        assert main(["prog", "warfarin", "fluconazole", "--age"]) == 2
        assert main(["prog", "warfarin", "fluconazole", "--age", "-4"]) == 2

    def test_help(self, capsys):
        assert main(["prog"]) == 0
        assert "Usage" in capsys.readouterr().out
