"""
Vercel entry point for the Domous OS API.

The team automation cron job and the dashboard both reach the API through
this WSGI application.
"""

import os
from app import create_app

# Vercel expects the WSGI application to be named 'app'
app = create_app()

if __name__ == "__main__":
    app.run(debug=False, host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
