"""Allow ``python -m legallens.cli`` execution."""

from legallens.cli.documents import main

main()
