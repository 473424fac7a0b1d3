"""Allow ``python -m effect_solutions``."""

from effect_solutions.cli import run

if __name__ == "__main__":
    run()
