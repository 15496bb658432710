"""Command-line interface."""
from meshsection.main import main

if __name__ == "__main__":
    main()
