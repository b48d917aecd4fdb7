"""Central configuration for runtime-tunable parameters.

Every constant can be overridden via an environment variable so that a
normal game runs with sensible defaults while the automated test-suite can
shorten timeouts or shrink the generator budgets where needed.
"""

from __future__ import annotations

import os


# ===========================================================================
# Network Defaults
# ===========================================================================
# SALVO_HOST: Address the listening side binds to and the dialing side connects to.
#   Defaults to "127.0.0.1".
#   Example: export SALVO_HOST=0.0.0.0
DEFAULT_HOST: str = os.getenv("SALVO_HOST", "127.0.0.1")

# SALVO_PORT: Default TCP port for both roles.
#   Defaults to 61337.
#   Example: export SALVO_PORT=5001
DEFAULT_PORT: int = int(os.getenv("SALVO_PORT", "61337"))


# ===========================================================================
# Transport Timing
# ===========================================================================
# SALVO_TIMEOUT: seconds to wait for one line from the peer before the read
#   counts as a transport failure. Defaults to 60 seconds.
#   Example: export SALVO_TIMEOUT=5
TIMEOUT: float = float(os.getenv("SALVO_TIMEOUT", "60"))

# SALVO_MAX_READ_FAILURES: consecutive transport failures tolerated before the
#   session gives up. The counter resets after every successful exchange.
#   Defaults to 3.
MAX_READ_FAILURES: int = int(os.getenv("SALVO_MAX_READ_FAILURES", "3"))


# ===========================================================================
# Game Constants
# ===========================================================================
# The wire alphabet (rows A-J, columns 1-10) fixes the board size.
BOARD_SIZE: int = 10

# Fleet roster: one 4-cell, two 3-cell, three 2-cell and four 1-cell ships.
# Largest first, the generator places ships in this order.
SHIP_SIZES: tuple[int, ...] = (4, 3, 3, 2, 2, 2, 1, 1, 1, 1)


# ===========================================================================
# Board Generator Budgets
# ===========================================================================
# SALVO_GENERATION_ATTEMPTS: whole-board restarts before generation fails.
#   Defaults to 1000.
GENERATION_ATTEMPTS: int = int(os.getenv("SALVO_GENERATION_ATTEMPTS", "1000"))

# SALVO_SHIP_ATTEMPTS: random start cells tried for a single ship before the
#   board is abandoned and generation restarts. Defaults to 100.
SHIP_ATTEMPTS: int = int(os.getenv("SALVO_SHIP_ATTEMPTS", "100"))


# ===========================================================================
# Map Storage
# ===========================================================================
# SALVO_MAP: default path of the board file. Generated on first use when missing.
#   Example: export SALVO_MAP=~/salvo/map.txt
DEFAULT_MAP: str = os.getenv("SALVO_MAP", "map.txt")


# ===========================================================================
# Debugging and Logging
# ===========================================================================
# SALVO_DEBUG: If "1", enables detailed debug logging across modules.
#   Defaults to "0" (disabled).
#   Example: export SALVO_DEBUG=1
DEBUG: bool = os.getenv("SALVO_DEBUG", "0") == "1"
