"""Allow running the package with python -m wgmeshgen (same as the wgmeshgen console script)."""
from wgmeshgen.main import main
import sys
sys.exit(main())
