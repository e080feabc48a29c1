# Tagcomplete — (c) 2025 rtj.dev LLC — MIT Licensed
"""Package-wide logger for Tagcomplete."""
import logging

logger: logging.Logger = logging.getLogger("tagcomplete")
