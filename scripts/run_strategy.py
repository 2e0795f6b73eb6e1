#!/usr/bin/env python3
# PURPOSE: Command-line runner for the rotation advisor.
# CONTEXT: Reads a request payload from a JSON file (or stdin with "-") and prints either the
#          Markdown text or the full JSON response.

import argparse, json, sys

from rotation_advisor.agent import Agent
from rotation_advisor.logging_setup import configure_logging


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run the strategy analysis or combined report for a payload.")
    parser.add_argument("payload", help="Path to a JSON request file, or '-' for stdin")
    parser.add_argument("--json", action="store_true", help="Print the full JSON response instead of the text")
    args = parser.parse_args(argv)

    configure_logging()
    if args.payload == "-":
        payload = json.load(sys.stdin)
    else:
        with open(args.payload, "r", encoding="utf-8") as f:
            payload = json.load(f)

    out = Agent().handle(payload)
    if args.json or out["status"] != "ok":
        print(json.dumps(out, indent=2))
    elif "report" in out:
        print(out["report"]["finalRecommendation"])
    else:
        print(out["analysis"]["summary"])
        print()
        print(out["analysis"]["analysis"])
    return 0 if out["status"] == "ok" else 1


if __name__ == "__main__":
    sys.exit(main())
