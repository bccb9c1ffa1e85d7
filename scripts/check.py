#!/usr/bin/env python3
"""
Проверка проекта api-client-core перед коммитом.

Шаги:
- black --check (или форматирование с --fix)
- ruff
- mypy по src/ (пропускается с --fast)
- pytest (с --unit-only без интеграционных тестов на локальном сервере)

Usage:
    python scripts/check.py
    python scripts/check.py --fast --unit-only
    python scripts/check.py --fix
"""

import argparse
import subprocess
import sys
from pathlib import Path
from typing import List, Tuple


class Colors:
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    BOLD = '\033[1m'
    END = '\033[0m'


def print_step(message: str) -> None:
    print(f"\n{Colors.BOLD}{Colors.BLUE}▶ {message}{Colors.END}")


def print_status(message: str, ok: bool) -> None:
    color, mark = (Colors.GREEN, "✓") if ok else (Colors.RED, "✗")
    print(f"{color}{mark} {message}{Colors.END}")


def print_warning(message: str) -> None:
    print(f"{Colors.YELLOW}⚠ {message}{Colors.END}")


def run_step(command: List[str], description: str, cwd: Path) -> Tuple[bool, str]:
    """
    Выполнить один шаг проверки.

    Отсутствующий инструмент не валит проверку, шаг помечается как пропущенный.

    Returns:
        (успех, объединённый stdout + stderr)
    """
    print_step(description)

    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='replace',
        )
    except FileNotFoundError:
        print_warning(f"{command[0]} не найден - шаг пропущен")
        return True, ""

    output = result.stdout + result.stderr
    ok = result.returncode == 0
    print_status(f"{description} - {'OK' if ok else 'FAILED'}", ok)
    if not ok:
        print(output[-2000:])
    return ok, output


def summarize_pytest(output: str) -> None:
    """Показать итоговую строку pytest (`N passed, M failed in Xs`)."""
    for line in output.splitlines():
        if line.startswith("=") and any(word in line for word in ("passed", "failed", "error")):
            print(line)


def main() -> int:
    parser = argparse.ArgumentParser(description="Проверка качества api-client-core")
    parser.add_argument("--fast", action="store_true", help="Без mypy")
    parser.add_argument("--fix", action="store_true", help="Применить black и ruff --fix")
    parser.add_argument("--skip-tests", action="store_true", help="Только линтеры")
    parser.add_argument("--unit-only", action="store_true", help="Пропустить тесты с маркером integration")
    args = parser.parse_args()

    root_dir = Path(__file__).resolve().parent.parent
    targets = ["src", "tests", "examples"]

    print(f"\n{Colors.BOLD}{'=' * 60}")
    print("  API Client Core - проверка качества")
    print(f"{'=' * 60}{Colors.END}")
    print(f"Root dir: {root_dir}")

    results = []

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # ФОРМАТИРОВАНИЕ И ЛИНТИНГ
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    black_command = ["black", *targets] if args.fix else ["black", "--check", *targets]
    results.append(("Black", run_step(black_command, "Форматирование (black)", root_dir)[0]))

    ruff_command = ["ruff", "check", *targets] + (["--fix"] if args.fix else [])
    results.append(("Ruff", run_step(ruff_command, "Линтинг (ruff)", root_dir)[0]))

    if args.fast:
        print_warning("mypy пропущен (--fast)")
    else:
        results.append(("Mypy", run_step(["mypy", "src/api_client"], "Типы (mypy)", root_dir)[0]))

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # ТЕСТЫ
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    if args.skip_tests:
        print_warning("Тесты пропущены (--skip-tests)")
    else:
        pytest_command = ["pytest", "-q", "-o", "addopts="]
        if args.unit_only:
            pytest_command += ["-m", "not integration"]
        ok, output = run_step(pytest_command, "Тесты (pytest)", root_dir)
        summarize_pytest(output)
        results.append(("Pytest", ok))

    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    # ИТОГ
    # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

    print(f"\n{Colors.BOLD}{'=' * 60}{Colors.END}")
    for name, ok in results:
        print_status(name, ok)

    if all(ok for _, ok in results):
        print(f"\n{Colors.GREEN}{Colors.BOLD}Все проверки прошли{Colors.END}\n")
        return 0

    print(f"\n{Colors.RED}{Colors.BOLD}Есть ошибки{Colors.END}\n")
    return 1


if __name__ == "__main__":
    sys.exit(main())
