# stonecrafter/__init__.py
from .routes import stones_bp
from .sockets import register_stones_socket_handlers


def init_stonecrafter(app, socketio):
    app.register_blueprint(stones_bp)
    register_stones_socket_handlers(socketio)
