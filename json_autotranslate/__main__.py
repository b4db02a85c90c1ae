import sys

from json_autotranslate.cli import main

sys.exit(main())
