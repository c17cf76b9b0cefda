"""Entry point for 'python -m keybastion' command."""

from keybastion.cli import main

if __name__ == "__main__":
    main()
