import time

from flask import Blueprint, current_app, jsonify

from quizroom.errors import ThemeNotFound

main = Blueprint('main', __name__)

_started_at = time.monotonic()


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the quiz room server!'})


@main.route('/health')
def health():
    return jsonify({
        'success': True,
        'uptime': round(time.monotonic() - _started_at, 3),
        'rooms': len(current_app.extensions['room_registry']),
    })


@main.route('/questions/<string:theme>')
def get_questions(theme):
    """Returns the authored questions of a theme."""
    try:
        questions = current_app.extensions['question_source'].load_raw(theme)
    except ThemeNotFound as exc:
        return jsonify({'success': False, 'message': exc.message}), 404
    return jsonify({'success': True, 'questions': questions})
