import logging

import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    allowed_origins = flask_app.config.get('ALLOWED_ORIGINS') or []
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Room coordination collaborators, one set per app
    from quizroom.services.identity import JwtIdentityVerifier
    from quizroom.services.questions import JsonQuestionSource
    from quizroom.services.rooms import RoomRegistry, SocketIOBroadcaster
    from quizroom.sessions import SessionStore

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    flask_app.extensions['room_registry'] = RoomRegistry(SocketIOBroadcaster(socketio, namespace=namespace))
    flask_app.extensions['session_store'] = SessionStore()
    flask_app.extensions['identity_verifier'] = JwtIdentityVerifier(
        flask_app.config['JWT_SECRET'],
        algorithm=flask_app.config.get('JWT_ALGORITHM', 'HS256'),
        ttl_days=int(flask_app.config.get('TOKEN_TTL_DAYS', 30)),
    )
    flask_app.extensions['question_source'] = JsonQuestionSource(
        flask_app.config['QUESTIONS_DIR'],
        default_points=int(flask_app.config.get('DEFAULT_POINT_VALUE', 10)),
    )

    from quizroom.main import main
    flask_app.register_blueprint(main)

    # Importing here ensures the handlers bind to the initialized socketio instance
    from quizroom.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    @click.command('issue-token')
    @click.argument('username')
    def issue_token_command(username):
        """Prints an identity token for USERNAME (local testing)."""
        click.echo(flask_app.extensions['identity_verifier'].issue(username))

    @click.command('list-themes')
    def list_themes_command():
        """Lists the question themes available in QUESTIONS_DIR."""
        for theme in flask_app.extensions['question_source'].themes():
            click.echo(theme)

    flask_app.cli.add_command(issue_token_command)
    flask_app.cli.add_command(list_themes_command)

    return flask_app
