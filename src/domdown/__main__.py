"""Allow ``python -m domdown``."""

from domdown.cli import main

raise SystemExit(main())
