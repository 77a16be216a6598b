import sys

from bpmn_inline.cli import main

sys.exit(main())
