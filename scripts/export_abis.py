#!/usr/bin/env python3
"""Extract the ChainResolver ABI from forge build output into abis/.

Run from the repo root after ``forge build``::

    scripts/export_abis.py

With ``--check`` the script fails when a function the tools call is missing
from the exported ABI.
"""

import argparse
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
FORGE_OUT = REPO_ROOT / "out"
ABI_DIR = REPO_ROOT / "abis"

CONTRACTS = [
    "ChainResolver",
]

# Functions the tools call; the deployed ABI must contain all of them.
REQUIRED_FUNCTIONS = {"resolve", "chainName", "chainId", "register", "setAddr"}


def missing_functions(abi: list[dict]) -> set[str]:
    names = {entry.get("name") for entry in abi if entry.get("type") == "function"}
    return REQUIRED_FUNCTIONS - names


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--forge-out", type=Path, default=FORGE_OUT)
    parser.add_argument("--check", action="store_true", help="fail if a used function is missing")
    args = parser.parse_args()

    ABI_DIR.mkdir(parents=True, exist_ok=True)
    status = 0

    for name in CONTRACTS:
        artifact = args.forge_out / f"{name}.sol" / f"{name}.json"
        if not artifact.exists():
            print(f"  SKIP  {name} (not found: {artifact})")
            continue

        abi = json.loads(artifact.read_text())["abi"]
        out_path = ABI_DIR / f"{name}.json"
        out_path.write_text(json.dumps(abi, indent=2) + "\n")
        print(f"  OK    {name} ({len(abi)} entries) -> {out_path.relative_to(REPO_ROOT)}")

        if args.check:
            missing = missing_functions(abi)
            if missing:
                print(f"  FAIL  {name} is missing: {', '.join(sorted(missing))}")
                status = 1

    return status


if __name__ == "__main__":
    sys.exit(main())
