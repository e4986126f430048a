"""Development entry point for running the trip report dashboard."""

import os

from tripview.app import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host="127.0.0.1", port=int(os.getenv("TRIPVIEW_PORT", "5000")))
