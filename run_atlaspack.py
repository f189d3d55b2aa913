import sys

if __name__ == "__main__":
    from atlaspack.cli import main

    sys.exit(main())
