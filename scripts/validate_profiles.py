#!/usr/bin/env python3
"""Validate declarative engine profile files.

Usage:
    python scripts/validate_profiles.py profiles/custom.json
    python scripts/validate_profiles.py path/to/new_profiles.json
"""

import json
import sys
from pathlib import Path

VALID_TYPES = {"dom", "script", "canvas", "canvas_size", "html", "webgl"}
PATTERN_TYPES = {"dom", "script", "html"}

REQUIRED_FIELDS = [
    "name",
    "signatures",
    "recommendations",
]


def validate_signature(sig: dict, prefix: str) -> list[str]:
    """Validate a single signature entry. Returns list of errors."""
    errors = []
    sig_type = str(sig.get("type", "")).lower()

    if sig_type not in VALID_TYPES:
        errors.append(f"{prefix}: invalid type '{sig_type}', must be one of {sorted(VALID_TYPES)}")
        return errors

    patterns = sig.get("patterns", [])
    if not isinstance(patterns, list) or not all(isinstance(p, str) and p for p in patterns):
        errors.append(f"{prefix}: patterns must be a list of non-empty strings")

    if sig_type in PATTERN_TYPES and not patterns:
        errors.append(f"{prefix}: '{sig_type}' signature needs at least one pattern")

    size = sig.get("size")
    if sig_type == "canvas_size" and not size:
        errors.append(f"{prefix}: canvas_size signature needs a size")
    if size is not None:
        if not isinstance(size, dict):
            errors.append(f"{prefix}: size must be an object with width and height")
        else:
            for key in ("width", "height"):
                value = size.get(key)
                if not isinstance(value, int) or value <= 0:
                    errors.append(f"{prefix}: size.{key} must be a positive integer")

    return errors


def validate_profile(profile: dict, index: int) -> list[str]:
    """Validate a single profile entry. Returns list of errors."""
    errors = []
    prefix = f"profiles[{index}] ({profile.get('name', 'UNKNOWN')})"

    # Required fields
    for field in REQUIRED_FIELDS:
        if field not in profile or not profile[field]:
            errors.append(f"{prefix}: missing required field '{field}'")

    for i, sig in enumerate(profile.get("signatures", []) or []):
        if not isinstance(sig, dict):
            errors.append(f"{prefix}.signatures[{i}]: must be an object")
            continue
        errors.extend(validate_signature(sig, f"{prefix}.signatures[{i}]"))

    for rec in profile.get("recommendations", []) or []:
        if not isinstance(rec, str) or len(rec) < 10:
            errors.append(f"{prefix}: recommendation too short (minimum 10 chars): {rec!r}")

    return errors


def validate_file(path: Path) -> tuple[int, list[str]]:
    """Validate a profile file. Returns (profile_count, errors)."""
    errors = []

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        return 0, [f"Invalid JSON: {e}"]

    # Handle both formats
    if isinstance(data, list):
        profiles = data
    elif isinstance(data, dict):
        profiles = data.get("profiles", [])
        if "version" not in data:
            errors.append("Missing 'version' field in file metadata")
    else:
        return 0, ["File must contain a JSON array or object with 'profiles' key"]

    # Check for duplicate names
    seen_names: set[str] = set()
    for profile in profiles:
        name = profile.get("name", "")
        if name in seen_names:
            errors.append(f"Duplicate profile name: '{name}'")
        seen_names.add(name)

    for i, profile in enumerate(profiles):
        errors.extend(validate_profile(profile, i))

    return len(profiles), errors


def main() -> int:
    if len(sys.argv) < 2:
        print(f"Usage: {sys.argv[0]} <profiles.json> [...]")
        return 1

    total_errors = 0
    for filepath in sys.argv[1:]:
        path = Path(filepath)
        if not path.exists():
            print(f"ERROR: File not found: {path}")
            total_errors += 1
            continue

        count, errors = validate_file(path)

        if errors:
            print(f"\n{path}: {count} profiles, {len(errors)} error(s)")
            for err in errors:
                print(f"  - {err}")
            total_errors += len(errors)
        else:
            print(f"{path}: {count} profiles, all valid")

    if total_errors > 0:
        print(f"\nTotal errors: {total_errors}")
        return 1

    print("\nAll profiles valid.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
