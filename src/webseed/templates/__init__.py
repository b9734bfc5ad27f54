"""Templates bundled with webseed. Each variant lives in its own sub-directory."""
