#!/usr/bin/env python3
"""
MediaShelf Development Server
Runs Flask on port 5000 with debug enabled
"""
from mediashelf_app import create_app

if __name__ == '__main__':
    app = create_app()
    app.run(
        host='0.0.0.0',
        port=5000,
        debug=True,
        use_reloader=False
    )
