"""
Martis Calculator Version

Stamped on every calculated row as calculator_version. Bump when a
formula, scale or reference file changes the numbers.
"""

VERSION = "1.0.0"
