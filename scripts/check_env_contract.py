#!/usr/bin/env python3
from __future__ import annotations

import ast
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SETTINGS_PATH = ROOT / "recaptcha_theme" / "settings.py"
ENV_EXAMPLE_PATH = ROOT / ".env.example"

SETTINGS_ENV_HELPERS = {"_env_bool", "_env_int", "_env_str"}
# Read by the process runner, not by the settings module.
ALLOWED_ENV_EXAMPLE_EXTRAS = {
    "APP_HOST",
    "APP_PORT",
}


def _call_name(node: ast.AST) -> str | None:
    if not isinstance(node, ast.Call):
        return None
    func = node.func
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute) and isinstance(func.value, ast.Name):
        return f"{func.value.id}.{func.attr}"
    return None


def _first_str_arg(node: ast.Call) -> str | None:
    if not node.args:
        return None
    first = node.args[0]
    if isinstance(first, ast.Constant) and isinstance(first.value, str):
        return first.value
    return None


def settings_env_names(settings_path: Path = SETTINGS_PATH) -> set[str]:
    tree = ast.parse(settings_path.read_text(encoding="utf-8"))
    names: set[str] = set()
    for node in ast.walk(tree):
        call_name = _call_name(node)
        if call_name != "os.getenv" and call_name not in SETTINGS_ENV_HELPERS:
            continue
        env_name = _first_str_arg(node)
        # The helpers call os.getenv(name) themselves.
        if env_name:
            names.add(env_name)
    return names


def env_example_names(env_example_path: Path = ENV_EXAMPLE_PATH) -> tuple[set[str], set[str]]:
    names: set[str] = set()
    duplicates: set[str] = set()
    for raw_line in env_example_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key = line.split("=", 1)[0].strip()
        if not key:
            continue
        if key in names:
            duplicates.add(key)
        names.add(key)
    return names, duplicates


def find_contract_problems(
    settings_path: Path = SETTINGS_PATH,
    env_example_path: Path = ENV_EXAMPLE_PATH,
) -> dict[str, list[str]]:
    settings_names = settings_env_names(settings_path)
    env_names, duplicate_names = env_example_names(env_example_path)
    return {
        "missing": sorted(settings_names - env_names),
        "unknown": sorted(env_names - settings_names - ALLOWED_ENV_EXAMPLE_EXTRAS),
        "duplicates": sorted(duplicate_names),
    }


def main() -> int:
    problems = find_contract_problems()
    if not any(problems.values()):
        print("Environment contract check passed.")
        return 0

    print("Environment contract check failed.")
    headings = {
        "missing": "Missing from .env.example (referenced in recaptcha_theme/settings.py):",
        "unknown": "Unknown keys in .env.example (not in settings or allowlist):",
        "duplicates": "Duplicate keys in .env.example:",
    }
    for kind, names in problems.items():
        if not names:
            continue
        print(headings[kind])
        for name in names:
            print(f"- {name}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
