import string

# Candidate characters for noise and flicker draws (A-Z, a-z, 0-9).
DEFAULT_POOL = string.ascii_uppercase + string.ascii_lowercase + string.digits
# Milliseconds between frames; 0 runs one frame per host tick.
DEFAULT_INTERVAL_MS = 0.0
# Per-frame probability that an unrevealed character is redrawn.
DEFAULT_FLICKER = 0.1

# Demo window
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 600
WINDOW_TITLE = "Scramble"
UPDATE_RATE = 1 / 60
FONT_SIZE = 28
TEXT_MARGIN = 40
DEMO_CONTAINER = "hero"
DEMO_MARKUP = "<p>Signal <b>acquired</b>. Decrypting <a href=\"#log\">transmission</a>...</p>"
DEMO_INTERVAL_MS = 30.0

# Characters kept verbatim and never scrambled: ASCII blanks, no-break and
# Unicode space separators, line/paragraph separators, and the BOM.
WHITESPACE = frozenset(
    "\t\n\v\f\r \u00a0\u1680"
    + "".join(chr(cp) for cp in range(0x2000, 0x200B))
    + "\u2028\u2029\u202f\u205f\u3000\ufeff"
)
