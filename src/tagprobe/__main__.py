"""Allow running as ``python -m tagprobe``."""

from tagprobe.cli import main

if __name__ == "__main__":
    main()
