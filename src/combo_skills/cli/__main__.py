import sys

from combo_skills.cli._dispatcher import main

sys.exit(main())
