# QuranLookup.py
import sys

from quranlookup.app import main

if __name__ == "__main__":
    sys.exit(main())
