"""Command-line verification of METAR/TAF bulletin files.

Usage examples:
    python scripts/verify_bulletins.py verify --metar METAR.txt --taf TAF.txt
    python scripts/verify_bulletins.py verify --metar METAR.txt --taf TAF.txt --results --json
    python scripts/verify_bulletins.py decode --type TAF TAF.txt
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

from tafverify.ingestors import decode_bulletin
from tafverify.services import summarize, verify_all


def _read(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        sys.stderr.write(f"Cannot read {path}: {exc}\n")
        raise SystemExit(1)


def cmd_verify(args) -> None:
    observations = decode_bulletin(_read(args.metar), "METAR")
    forecasts = decode_bulletin(_read(args.taf), "TAF")
    if not observations.metars:
        sys.stderr.write("No decodable METAR found.\n")
        raise SystemExit(1)

    results = verify_all(observations.metars, forecasts.tafs)
    summary = summarize(results)

    if args.json:
        output = {"summary": summary.model_dump(mode="json")}
        if args.results:
            output["results"] = [
                result.model_dump(mode="json", exclude={"observation", "forecast"})
                for result in results
            ]
        print(json.dumps(output, indent=2))
        return

    if args.results:
        for result in results:
            observed = result.observation
            time_label = observed.observed_at.label if observed.observed_at else "??????Z"
            print(
                f"{observed.station} {time_label}: score={result.composite_score:.1f}"
                f" rating={result.rating.value} status={result.status.value}"
                f" lead={result.lead_time_bucket or 'n/a'}"
            )
    print(
        f"Observations: {summary.count} (verifiable {summary.verifiable_count})"
        f" mean={summary.mean_score if summary.mean_score is not None else 'n/a'}"
        f" trend={summary.trend.value} longest_poor_run={summary.longest_poor_run}"
    )
    failures = observations.failures + forecasts.failures
    if failures:
        print(f"Undecodable fragments: {len(failures)}")


def cmd_decode(args) -> None:
    bulletin = decode_bulletin(_read(args.path), args.type)
    print(json.dumps(bulletin.model_dump(mode="json"), indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Verify TAF forecasts against METAR observations")
    sub = parser.add_subparsers(dest="command", required=True)

    verify_cmd = sub.add_parser("verify", help="Verify a METAR bulletin against a TAF bulletin")
    verify_cmd.add_argument("--metar", required=True, help="Path to the METAR bulletin file")
    verify_cmd.add_argument("--taf", required=True, help="Path to the TAF bulletin file")
    verify_cmd.add_argument("--results", action="store_true", help="Include per-observation results")
    verify_cmd.add_argument("--json", action="store_true", help="Return JSON output")
    verify_cmd.set_defaults(func=cmd_verify)

    decode_cmd = sub.add_parser("decode", help="Decode every report in a bulletin file")
    decode_cmd.add_argument("path", help="Path to the bulletin file")
    decode_cmd.add_argument("--type", choices=("METAR", "TAF"), help="Report type for unlabelled reports")
    decode_cmd.set_defaults(func=cmd_decode)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
