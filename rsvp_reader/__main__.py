"""Package entry point for ``python -m rsvp_reader``."""

from rsvp_reader.cli import main

if __name__ == "__main__":
    main()
