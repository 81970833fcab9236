import os, sys
BASE = os.getenv("REGPORTAL_HOME", "/opt/regportal")
if os.path.isdir(os.path.join(BASE, "regportal")) and BASE not in sys.path:
    sys.path.insert(0, BASE)

from regportal import create_app

app = create_app()
