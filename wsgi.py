"""
WSGI Entry Point for Production Deployment
Roster service

Usage with Gunicorn:
    gunicorn --config gunicorn_config.py wsgi:app
"""
import os
import sys
from pathlib import Path

# Add the application directory to the Python path
base_dir = Path(__file__).resolve().parent
sys.path.insert(0, str(base_dir))

# Set production environment if not already set
if 'FLASK_ENV' not in os.environ:
    os.environ['FLASK_ENV'] = 'production'

from sqlalchemy.exc import SQLAlchemyError

from roster import create_app, init_db

app = create_app(os.environ['FLASK_ENV'])

# Create tables when the database is reachable; migrations take over otherwise
try:
    init_db(app)
except SQLAlchemyError as e:
    app.logger.warning(f"Database initialization skipped or failed: {e}")

# This is the WSGI application object
application = app

if __name__ == "__main__":
    # Local run only; use a WSGI server like Gunicorn in production
    app.run(debug=True, host='0.0.0.0', port=5000)
