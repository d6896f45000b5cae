from __future__ import annotations

import json
import sys

from .documentation import NO_RISK_FACTORS_MESSAGE, format_clinical_documentation
from .models import OrganFunction, PatientFactors
from .risk_scorer import analyze_interactions

USAGE = (
    "Usage: python -m app.services.interactions <drug> <drug> [...] "
    "[--age N] [--renal LEVEL] [--hepatic LEVEL] [--pregnant] [--json]"
)

_VALUE_FLAGS = ("--age", "--renal", "--hepatic")


def _option(argv: list[str], flag: str) -> str | None:
    if flag not in argv:
        return None
    idx = argv.index(flag)
    if idx + 1 >= len(argv):
        raise ValueError(f"{flag} requires a value")
    return argv[idx + 1]


def parse_args(argv: list[str]) -> tuple[list[str], PatientFactors, bool]:
    """Split argv into drugs, patient factors and the --json switch."""
    args = argv[1:]
    drugs = []
    skip = False
    for arg in args:
        if skip:
            skip = False
            continue
        if arg in _VALUE_FLAGS:
            skip = True
            continue
        if arg.startswith("--"):
            continue
        drugs.append(arg)

    age = _option(args, "--age")
    renal = _option(args, "--renal")
    hepatic = _option(args, "--hepatic")

    factors = PatientFactors(
        age=float(age) if age is not None else None,
        renal_function=OrganFunction(renal.lower()) if renal else None,
        hepatic_function=OrganFunction(hepatic.lower()) if hepatic else None,
        pregnancy="--pregnant" in args,
    )
    return drugs, factors, "--json" in args


def main(argv: list[str]) -> int:
    if len(argv) < 2 or "--help" in argv:
        print(USAGE)
        return 0

    try:
        drugs, factors, as_json = parse_args(argv)
    except ValueError as e:
        print(f"Error: {e}")
        return 2

    analysis = analyze_interactions(drugs, factors)

    if as_json:
        print(json.dumps(analysis.model_dump(mode="json"), indent=2))
    elif not analysis.sufficient_data:
        print(analysis.message)
    else:
        print(format_clinical_documentation(analysis))
        print("Risk factors: " + (", ".join(analysis.risk_factors) or NO_RISK_FACTORS_MESSAGE))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
