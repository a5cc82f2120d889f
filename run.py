"""Local development server."""

import os

from wsgi import app
from app.extensions import db


if __name__ == '__main__':
    with app.app_context():
        db.create_all()

    host = os.environ.get('HOST', '127.0.0.1')
    port = int(os.environ.get('PORT', 5000))
    app.run(host=host, port=port)
