"""Logger lookup for the dynstr modules.

dynstr only emits DEBUG records: buffer growth in ``dynstr.buffer``, end of
stream in ``dynstr.reader`` and fatal command-line errors in
``dynstr.options``. No handler is installed, so the records stay silent until
the embedding application configures the ``dynstr`` logger.

Example:
    >>> import logging
    >>> logging.getLogger("dynstr").setLevel(logging.DEBUG)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a dynstr module.

    Names outside the package namespace are moved under it, so ``"reader"``
    and ``"dynstr.reader"`` resolve to the same logger.

    >>> get_logger("reader").name
    'dynstr.reader'
    """
    if not (name == "dynstr" or name.startswith("dynstr.")):
        name = f"dynstr.{name}"
    return logging.getLogger(name)
