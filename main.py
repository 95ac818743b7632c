"""Serve the event lifecycle API with uvicorn.

Development runs a single debug-logging process. Production runs
WEB_CONCURRENCY workers behind a proxy. Both listen on PORT (default 8000).
Operator tasks live in scripts/events.py instead.
"""

import os

from event_lifecycle.config.environment import IS_PRODUCTION_ENVIRONMENT
from event_lifecycle.api.app import app

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get('PORT', 8000))
    if not IS_PRODUCTION_ENVIRONMENT:
        # Single process, so the imported app object can be passed directly
        uvicorn.run(
            app,
            host="0.0.0.0",
            port=port,
            log_level="debug"
        )
    else:
        uvicorn.run(
            "event_lifecycle.api.app:app",  # workers need an import string, not an app object
            host="0.0.0.0",
            port=port,
            reload=False,
            workers=int(os.environ.get('WEB_CONCURRENCY', 4)),
            log_level="info",
            proxy_headers=True,
            forwarded_allow_ips="*"
        )
