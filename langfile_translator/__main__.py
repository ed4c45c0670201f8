import sys

from langfile_translator.cli import main

sys.exit(main())
