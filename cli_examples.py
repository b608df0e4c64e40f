#!/usr/bin/env python3
"""
Examples of using the prng30 CLI for different scenarios.
"""

import subprocess


def run_cli_command(args):
    """Run a CLI command and capture its output."""
    cmd = ["prng30-cli"] + args
    print(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=60)
        print(result.stdout)
        if result.stderr:
            print(f"Stderr: {result.stderr}")
        print("-" * 50)
        return result.returncode == 0
    except subprocess.TimeoutExpired:
        print("Command timed out")
        return False


def main():
    """Run various CLI examples."""
    print("Rule 30 PRNG CLI Examples")
    print("=" * 50)

    examples = [
        (["--seed", "777", "--count", "5"], "Five 32-bit values from a fixed seed"),
        (["--seed", "777", "--bits", "64", "--count", "3", "--verbose"], "Numbered 64-bit values"),
        (["--size", "128", "--bits", "16", "--count", "4"], "Wider automaton seeded from the clock"),
        (["--seed", "42", "--streams", "3", "--count", "2"], "Three independent streams"),
        (["--dice", "6", "--count", "20"], "Twenty six-sided dice"),
        (["--seed", "777", "--stats", "--samples", "5000"], "Statistics battery"),
        (["--size", "0"], "Invalid size (exits with code 1)"),
    ]

    for args, description in examples:
        print(f"\n{description}:")
        run_cli_command(args)


if __name__ == "__main__":
    main()
