"""支持 python -m gouse 运行。"""

import sys

from gouse.main import main

sys.exit(main())
