"""Flask entry point for the Kudos Board REST API."""

import os

from kudos.config import is_debug_enabled
from kudos_api import create_app

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", "3000"))
    print(f"Server is running on http://localhost:{port}")
    app.run(host="0.0.0.0", port=port, debug=is_debug_enabled())
