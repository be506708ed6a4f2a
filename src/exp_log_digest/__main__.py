"""Module entrypoint.

Allows:
    python -m exp_log_digest
"""

from __future__ import annotations

from exp_log_digest.cli import main

if __name__ == "__main__":
    main()
