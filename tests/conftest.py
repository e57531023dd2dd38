import os
import sys

import logfire

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

# Keep spans local; nothing is exported during tests
logfire.configure(send_to_logfire=False, console=False)
