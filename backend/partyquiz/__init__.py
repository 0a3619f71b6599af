from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from partyquiz.routes import main
    flask_app.register_blueprint(main)

    from partyquiz.api.party import party
    flask_app.register_blueprint(party, url_prefix='/api/party')

    from partyquiz.api.quiz import quiz
    flask_app.register_blueprint(quiz, url_prefix='/api/quiz')

    from partyquiz.errors import register_error_handlers
    register_error_handlers(flask_app)

    from partyquiz.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database with a demo party."""
        from partyquiz.services.quiz.parties import create_party
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            demo = create_party(5)
            print('Database has been reset and seeded!')
            print(f"Demo party code={demo.code} host_id={demo.host_id}")

    flask_app.cli.add_command(db_reset_command)

    return flask_app
