"""Run the sampler and web server.

Usage: python -m hygro [--pin PIN] [--host HOST] [--port PORT]
"""

from hygro.server.__main__ import main

if __name__ == "__main__":
    main()
