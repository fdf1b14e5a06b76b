"""Entry point for 'python -m device_registry' command."""

from device_registry.cli import main

if __name__ == "__main__":
    main()
