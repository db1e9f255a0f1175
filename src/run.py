"""Flask entry point for the Kudos Board browser UI."""

from board import create_app
from kudos.config import is_debug_enabled

app = create_app()

if __name__ == "__main__":
    # Dev defaults: listen on all interfaces so containers/VMs can reach Flask.
    app.run(host="0.0.0.0", port=8080, debug=is_debug_enabled())
