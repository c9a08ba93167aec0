"""The grammar compiler, the scanner, and the highlighting interface."""
