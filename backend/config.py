import os

basedir = os.path.abspath(os.path.dirname(__file__))


def _env_bool(name, default='false'):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Identity tokens (HS256). Falls back to the Flask secret when unset.
    JWT_SECRET = os.environ.get('JWT_SECRET') or SECRET_KEY
    JWT_ALGORITHM = os.environ.get('JWT_ALGORITHM', 'HS256')
    TOKEN_TTL_DAYS = int(os.environ.get('TOKEN_TTL_DAYS', '30'))
    # Accept token-less sockets as guest_<sid>
    ALLOW_GUESTS = _env_bool('ALLOW_GUESTS')
    ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            'ALLOWED_ORIGINS',
            'https://chic-torte-4d4c16.netlify.app,http://localhost:5173,http://localhost:3000',
        ).split(',')
        if origin.strip()
    ]
    # Question themes: <QUESTIONS_DIR>/<theme>.json
    QUESTIONS_DIR = os.environ.get('QUESTIONS_DIR') or os.path.join(basedir, 'data', 'questions')
    DEFAULT_THEME = os.environ.get('DEFAULT_THEME', 'minecraft')
    # 0 disables the points threshold
    DEFAULT_POINTS_TO_WIN = int(os.environ.get('DEFAULT_POINTS_TO_WIN', '100'))
    DEFAULT_TIME_PER_QUESTION = int(os.environ.get('DEFAULT_TIME_PER_QUESTION', '30'))
    DEFAULT_POINT_VALUE = int(os.environ.get('DEFAULT_POINT_VALUE', '10'))
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
