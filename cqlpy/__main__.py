"""Allow ``python -m cqlpy``."""
from cqlpy.cli.main import main

if __name__ == "__main__":
    main()
