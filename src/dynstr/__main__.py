"""Entry point for ``python -m dynstr``."""

from dynstr.options import main

raise SystemExit(main())
