from dotenv import load_dotenv

load_dotenv()

from dinnersafari import create_app
from dinnersafari.extensions import db
from dinnersafari.routes import register_blueprints

api = create_app()

# Register all Blueprints (envelope api, admin, index)
register_blueprints(api)

def init_db():
    """Ensure DB tables exist."""
    db.create_all()

# Run DB bootstrap once at startup
with api.app_context():
    init_db()

if __name__ == "__main__":
    api.run(debug=True)
