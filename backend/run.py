from wordboard import create_app, server_options, shutdown_app, socketio

app = create_app()

if __name__ == '__main__':
    try:
        socketio.run(app, **server_options(app))
    finally:
        app.logger.info('Shutting down server...')
        shutdown_app(app)
