"""Allow `python -m stackshell`."""

from stackshell.cli.main import main

if __name__ == "__main__":
    main()
