"""mole - Deep clean and optimize your Linux system.

Scans caches, build artifacts, and leftover application files and removes
them behind a path-safety validation layer.
"""

__version__ = "0.1.0"
