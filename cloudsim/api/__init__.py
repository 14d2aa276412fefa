from __future__ import annotations


def register_routes(app) -> None:
    from .routes.connection_routes import connection_routes
    from .routes.simulation_routes import simulation_routes

    app.register_blueprint(simulation_routes)
    app.register_blueprint(connection_routes)
