"""Allow ``python -m stopwatch``."""

from stopwatch._cli import main

main()
