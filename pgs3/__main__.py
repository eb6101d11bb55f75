"""Allow ``python -m pgs3``."""

from pgs3.cli.main import main

main()
